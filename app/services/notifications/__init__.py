"""
Notification Fan-out

Publish/subscribe for real-time order events. The hub is built once per
process by the application lifespan and reached through the
get_notifier() dependency.

Author: Khalil Bannouri
Version: 1.0.0
"""

from fastapi import Request

from app.services.notifications.base import (
    BaseNotifier,
    DeliveryResult,
    Subscriber,
    order_group,
    NEW_ORDER,
    ORDER_READ,
    ORDER_COMPLETED,
    ORDER_UPDATED,
    JOIN_ORDER,
    LEAVE_ORDER,
)
from app.services.notifications.hub import NotificationHub
from app.services.notifications.websocket import WebSocketSubscriber


def get_notifier(request: Request) -> BaseNotifier:
    """Dependency returning the process-wide hub."""
    return request.app.state.hub


__all__ = [
    "get_notifier",
    "BaseNotifier",
    "DeliveryResult",
    "Subscriber",
    "NotificationHub",
    "WebSocketSubscriber",
    "order_group",
    "NEW_ORDER",
    "ORDER_READ",
    "ORDER_COMPLETED",
    "ORDER_UPDATED",
    "JOIN_ORDER",
    "LEAVE_ORDER",
]
