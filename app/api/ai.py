"""
AI Chat Endpoint

Answers menu questions with the assistant built at startup, grounded in
the currently available dishes.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.exceptions import BadRequest, InternalError
from app.database import get_db
from app.models import MenuItem
from app.schemas import ApiResponse, ChatReply, ChatRequest, ErrorResponse
from app.services.assistant import (
    BaseAssistant,
    MenuEntry,
    build_menu_context,
    get_assistant,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"], dependencies=[Depends(get_current_user)])


@router.post(
    "/chat",
    response_model=ApiResponse[ChatReply],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(
    body: ChatRequest,
    db: AsyncSession = Depends(get_db),
    assistant: BaseAssistant = Depends(get_assistant),
) -> ApiResponse[ChatReply]:
    if not body.message or not body.message.strip():
        raise BadRequest("Message is required.")

    result = await db.execute(
        select(MenuItem).where(MenuItem.is_available.is_(True)).order_by(MenuItem.id)
    )
    menu_context = build_menu_context(
        MenuEntry(
            name=item.name,
            description=item.description or "",
            price=float(item.price),
            category=item.category,
        )
        for item in result.scalars().all()
    )

    answer = await assistant.reply(body.message, menu_context)
    if not answer.success or not answer.reply:
        logger.error(f"Assistant ({assistant.provider_name}) failed: {answer.error_message}")
        raise InternalError()

    return ApiResponse(data=ChatReply(reply=answer.reply))
