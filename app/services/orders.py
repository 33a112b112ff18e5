"""
Order Service

Order lifecycle and pricing:
    preparing (initial) -> completed (terminal)

Pricing trusts the unit prices supplied by the client; the catalog is not
consulted at submission time. Students receive a flat discount computed
once, at submission.

Every state change is pushed through the notifier:
    - new_order        broadcast, full order payload
    - order_read       broadcast, {orderId, customerId}, first kitchen view only
    - order_completed  broadcast, bare order id
    - order_updated    sent to the order's group, {id, status}

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from decimal import Decimal
from typing import Any, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import BadRequest, Forbidden, NotFound
from app.models import KITCHEN_ROLES, Order, OrderStatus, User, UserRole, dump_line_items
from app.schemas import LineItem, OrderResponse, OrderStatusResponse, to_money
from app.services.notifications import (
    BaseNotifier,
    NEW_ORDER,
    ORDER_COMPLETED,
    ORDER_READ,
    ORDER_UPDATED,
    order_group,
)

logger = logging.getLogger(__name__)


def calculate_order_totals(
    items: Sequence[LineItem],
    role: Optional[UserRole],
    discount_rate: Decimal,
) -> dict[str, Decimal]:
    """
    Calculate original price, discount and final price.

    Only students get a discount; guests and every other role pay the
    original price.
    """
    original = to_money(sum((item.price for item in items), Decimal("0")))
    discount = to_money(original * discount_rate) if role == UserRole.STUDENT else to_money(0)
    return {
        "original_price": original,
        "discount_amount": discount,
        "final_price": original - discount,
    }


def parse_status(status: Optional[str]) -> Optional[OrderStatus]:
    if not status:
        return None
    try:
        return OrderStatus(status.lower())
    except ValueError:
        raise BadRequest(f"Invalid status. Options: {[s.value for s in OrderStatus]}")


class OrderService:
    """Creates orders, exposes read models and drives status transitions."""

    def __init__(self, session: AsyncSession, notifier: BaseNotifier, settings: Settings):
        self.session = session
        self.notifier = notifier
        self.settings = settings

    async def submit(self, user: Optional[User], items: Any) -> OrderResponse:
        """
        Price and persist a new order, then announce it to the kitchen.

        Raises:
            BadRequest: ``items`` is not a non-empty list
        """
        if not isinstance(items, list) or not items:
            raise BadRequest("Items required")

        line_items = [item if isinstance(item, LineItem) else LineItem.model_validate(item) for item in items]
        totals = calculate_order_totals(
            line_items,
            role=user.role if user else None,
            discount_rate=Decimal(str(self.settings.student_discount_rate)),
        )

        order = Order(
            items=dump_line_items(item.model_dump(mode="json") for item in line_items),
            status=OrderStatus.PREPARING,
            customer_id=user.id if user else None,
            customer_name=user.name if user else self.settings.guest_name,
            is_viewed=False,
            **totals,
        )
        self.session.add(order)
        await self.session.commit()
        await self.session.refresh(order)

        logger.info(
            f"Order #{order.id} created for {order.customer_name}: "
            f"{totals['original_price']} - {totals['discount_amount']} = {totals['final_price']}"
        )

        data = OrderResponse.from_order(order)
        await self.notifier.broadcast_all(NEW_ORDER, data.model_dump(mode="json"))
        return data

    async def list_orders(self, status: Optional[str] = None) -> list[OrderResponse]:
        """All orders, newest first, optionally filtered by exact status."""
        stmt = select(Order).order_by(Order.id.desc())
        status_enum = parse_status(status)
        if status_enum is not None:
            stmt = stmt.where(Order.status == status_enum)

        result = await self.session.execute(stmt)
        return [OrderResponse.from_order(order) for order in result.scalars().all()]

    async def list_mine(self, user: User) -> list[OrderResponse]:
        """The caller's own orders, newest first."""
        result = await self.session.execute(
            select(Order).where(Order.customer_id == user.id).order_by(Order.id.desc())
        )
        return [OrderResponse.from_order(order) for order in result.scalars().all()]

    async def get_by_id(self, user: User, order_id: int) -> OrderResponse:
        """
        Fetch one order.

        Kitchen roles may see any order; everyone else only their own. The
        first kitchen view marks the order as read and broadcasts
        ``order_read`` once.
        """
        order = await self.session.get(Order, order_id)
        if order is None:
            raise NotFound("Order not found")

        is_kitchen = user.role in KITCHEN_ROLES
        is_owner = order.customer_id is not None and order.customer_id == user.id
        if not is_kitchen and not is_owner:
            raise Forbidden()

        if is_kitchen and not order.is_viewed:
            # Conditional update: only one viewer can flip the flag
            result = await self.session.execute(
                update(Order)
                .where(Order.id == order_id, Order.is_viewed.is_(False))
                .values(is_viewed=True)
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
            await self.session.refresh(order)

            if result.rowcount == 1:
                logger.info(f"Order #{order_id} viewed by kitchen (user #{user.id})")
                await self.notifier.broadcast_all(
                    ORDER_READ,
                    {"orderId": order.id, "customerId": order.customer_id},
                )

        return OrderResponse.from_order(order)

    async def complete(self, order_id: int) -> OrderStatusResponse:
        """
        Mark an order completed.

        Completing an already completed order succeeds again and re-emits
        both events.
        """
        result = await self.session.execute(
            update(Order)
            .where(Order.id == order_id)
            .values(status=OrderStatus.COMPLETED)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()

        if result.rowcount == 0:
            raise NotFound("Order not found")

        logger.info(f"Order #{order_id} completed")

        payload = OrderStatusResponse(id=order_id, status=OrderStatus.COMPLETED)
        await self.notifier.broadcast_all(ORDER_COMPLETED, order_id)
        await self.notifier.send_to_group(
            order_group(order_id),
            ORDER_UPDATED,
            payload.model_dump(mode="json"),
        )
        return payload
