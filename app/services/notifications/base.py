"""
Notification Fan-out Abstract Base Classes

Defines the two publish primitives the order flow depends on
(broadcast to everyone, send to one group) and the interface a live
connection must implement to receive events. Transports (WebSocket) and
test doubles plug in behind these interfaces.

Author: Khalil Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


# Server -> client events
NEW_ORDER = "new_order"
ORDER_READ = "order_read"
ORDER_COMPLETED = "order_completed"
ORDER_UPDATED = "order_updated"

# Client -> server events
JOIN_ORDER = "join_order"
LEAVE_ORDER = "leave_order"


def order_group(order_id: Any) -> str:
    """Group key for subscribers following a single order."""
    return f"order:{order_id}"


@dataclass
class DeliveryResult:
    """Result from publishing one event."""
    event: str
    delivered: int = 0
    failed: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed


class Subscriber(ABC):
    """A live connection that can receive events."""

    @property
    @abstractmethod
    def connection_id(self) -> str:
        """Unique id of this connection."""
        pass

    @abstractmethod
    async def send(self, event: str, payload: Any) -> None:
        """Deliver one event. Raises if the connection is gone."""
        pass


class BaseNotifier(ABC):
    """Publish interface used by the order service."""

    @abstractmethod
    async def broadcast_all(self, event: str, payload: Any) -> DeliveryResult:
        """Deliver to every connected subscriber."""
        pass

    @abstractmethod
    async def send_to_group(self, group_key: str, event: str, payload: Any) -> DeliveryResult:
        """Deliver only to subscribers that joined ``group_key``."""
        pass
