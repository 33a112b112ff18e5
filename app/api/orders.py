"""
Order Endpoints

    - POST /api/orders                 student/faculty, broadcasts new_order
    - GET  /api/orders                 staff/admin, optional ?status=
    - GET  /api/orders/mine            student/faculty
    - GET  /api/orders/{id}            owner or staff/admin, may broadcast order_read
    - PUT  /api/orders/{id}/complete   staff/admin, order_completed + order_updated
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_user, get_order_service, require_roles
from app.models import CUSTOMER_ROLES, KITCHEN_ROLES, User
from app.schemas import (
    ApiResponse,
    ErrorResponse,
    OrderCreate,
    OrderResponse,
    OrderStatusResponse,
)
from app.services.orders import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "",
    response_model=ApiResponse[OrderResponse],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="Submit an order",
)
async def create_order(
    body: OrderCreate,
    user: User = Depends(require_roles(*CUSTOMER_ROLES)),
    orders: OrderService = Depends(get_order_service),
) -> ApiResponse[OrderResponse]:
    """
    Prices come from the submitted items. Students get the student
    discount. The kitchen is notified with a ``new_order`` event.
    """
    order = await orders.submit(user, body.items)
    return ApiResponse(data=order)


@router.get(
    "",
    response_model=ApiResponse[List[OrderResponse]],
    dependencies=[Depends(require_roles(*KITCHEN_ROLES))],
    responses={400: {"model": ErrorResponse}},
    summary="List orders (kitchen)",
)
async def list_orders(
    status_filter: Optional[str] = Query(None, alias="status", description="preparing | completed"),
    orders: OrderService = Depends(get_order_service),
) -> ApiResponse[List[OrderResponse]]:
    return ApiResponse(data=await orders.list_orders(status_filter))


@router.get(
    "/mine",
    response_model=ApiResponse[List[OrderResponse]],
    summary="List my orders",
)
async def list_my_orders(
    user: User = Depends(require_roles(*CUSTOMER_ROLES)),
    orders: OrderService = Depends(get_order_service),
) -> ApiResponse[List[OrderResponse]]:
    return ApiResponse(data=await orders.list_mine(user))


@router.get(
    "/{order_id}",
    response_model=ApiResponse[OrderResponse],
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_order(
    order_id: int,
    user: User = Depends(get_current_user),
    orders: OrderService = Depends(get_order_service),
) -> ApiResponse[OrderResponse]:
    return ApiResponse(data=await orders.get_by_id(user, order_id))


@router.put(
    "/{order_id}/complete",
    response_model=ApiResponse[OrderStatusResponse],
    dependencies=[Depends(require_roles(*KITCHEN_ROLES))],
    responses={404: {"model": ErrorResponse}},
    summary="Mark an order completed",
)
async def complete_order(
    order_id: int,
    orders: OrderService = Depends(get_order_service),
) -> ApiResponse[OrderStatusResponse]:
    return ApiResponse(data=await orders.complete(order_id))
