"""
Menu Endpoints

Public browsing plus staff/admin maintenance.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_catalog_service, get_current_user, require_roles
from app.models import KITCHEN_ROLES, User
from app.schemas import (
    ApiResponse,
    DeletedResponse,
    ErrorResponse,
    MenuItemCreate,
    MenuItemResponse,
    TrendingItemResponse,
)
from app.services.catalog import CatalogService

router = APIRouter(prefix="/menus", tags=["Menu"])

staff_only = Depends(require_roles(*KITCHEN_ROLES))


# =============================================================================
# BROWSING
# =============================================================================

@router.get("", response_model=ApiResponse[List[MenuItemResponse]], summary="List / search menu")
async def list_menu(
    q: Optional[str] = Query(None, description="Substring of name or description"),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[List[MenuItemResponse]]:
    items = await catalog.search(q)
    return ApiResponse(data=[MenuItemResponse.model_validate(i) for i in items])


@router.get("/recommendations", response_model=ApiResponse[List[MenuItemResponse]])
async def recommendations(
    user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[List[MenuItemResponse]]:
    items = await catalog.recommendations(user)
    return ApiResponse(data=[MenuItemResponse.model_validate(i) for i in items])


@router.get("/trending", response_model=ApiResponse[List[TrendingItemResponse]])
async def trending(
    catalog: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[List[TrendingItemResponse]]:
    ranked = await catalog.trending()
    return ApiResponse(data=[
        TrendingItemResponse(
            **MenuItemResponse.model_validate(item).model_dump(),
            order_count=count,
        )
        for item, count in ranked
    ])


@router.get("/reorder", response_model=ApiResponse[List[MenuItemResponse]])
async def reorder(
    user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[List[MenuItemResponse]]:
    items = await catalog.reorderable(user)
    return ApiResponse(data=[MenuItemResponse.model_validate(i) for i in items])


@router.get(
    "/{item_id}",
    response_model=ApiResponse[MenuItemResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_menu_item(
    item_id: int,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[MenuItemResponse]:
    item = await catalog.get(item_id)
    return ApiResponse(data=MenuItemResponse.model_validate(item))


# =============================================================================
# MAINTENANCE (staff/admin)
# =============================================================================

@router.post(
    "",
    response_model=ApiResponse[MenuItemResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[staff_only],
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_menu_item(
    body: MenuItemCreate,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[MenuItemResponse]:
    item = await catalog.create(body)
    return ApiResponse(data=MenuItemResponse.model_validate(item))


@router.put(
    "/{item_id}",
    response_model=ApiResponse[MenuItemResponse],
    dependencies=[staff_only],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_menu_item(
    item_id: int,
    body: MenuItemCreate,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[MenuItemResponse]:
    item = await catalog.update(item_id, body)
    return ApiResponse(data=MenuItemResponse.model_validate(item))


@router.delete(
    "/{item_id}",
    response_model=ApiResponse[DeletedResponse],
    dependencies=[staff_only],
    responses={404: {"model": ErrorResponse}},
)
async def delete_menu_item(
    item_id: int,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[DeletedResponse]:
    deleted_id = await catalog.delete(item_id)
    return ApiResponse(data=DeletedResponse(id=deleted_id))
