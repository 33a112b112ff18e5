"""
Statistics Endpoints
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_statistics_service, require_roles
from app.models import KITCHEN_ROLES
from app.schemas import ApiResponse, StatisticsSummary
from app.services.statistics import StatisticsService

router = APIRouter(prefix="/statistics", tags=["Statistics"])


@router.get(
    "/summary",
    response_model=ApiResponse[StatisticsSummary],
    dependencies=[Depends(require_roles(*KITCHEN_ROLES))],
)
async def summary(
    stats: StatisticsService = Depends(get_statistics_service),
) -> ApiResponse[StatisticsSummary]:
    """Order count, revenue, best sellers and the last 7 days of sales."""
    return ApiResponse(data=await stats.summary())
