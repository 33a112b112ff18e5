"""
In-Memory Notification Hub

Process-wide registry of live subscribers, keyed by connection id, with a
membership set per connection. Built by the application lifespan and torn
down on shutdown; nothing survives a restart, and clients must re-join
their order groups after reconnecting.

Delivery is best-effort: events are not stored, replayed or acknowledged.
A subscriber that joins while an event is being published may or may not
receive it.

Author: Khalil Bannouri
Version: 1.0.0
"""

import asyncio
import logging
import threading
from typing import Any, Optional

from app.services.notifications.base import (
    BaseNotifier,
    DeliveryResult,
    Subscriber,
)

logger = logging.getLogger(__name__)


class NotificationHub(BaseNotifier):
    """
    Registry of connected subscribers and their group memberships.

    Registry mutations (connect/disconnect/join/leave) take a lock so they
    are safe from concurrent request handlers. Publishing works on a
    snapshot taken under the same lock, then sends outside of it.

    Example:
        >>> hub = NotificationHub()
        >>> hub.connect(subscriber)
        >>> hub.join(subscriber.connection_id, order_group(42))
        >>> await hub.send_to_group(order_group(42), "order_updated", {...})
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: dict[str, Subscriber] = {}
        self._memberships: dict[str, set[str]] = {}
        self._closed = False
        logger.info("NotificationHub initialized")

    # ==========================================================================
    # REGISTRY
    # ==========================================================================

    def connect(self, subscriber: Subscriber) -> None:
        """Register a live connection."""
        with self._lock:
            self._subscribers[subscriber.connection_id] = subscriber
            self._memberships.setdefault(subscriber.connection_id, set())
        logger.debug(f"Subscriber connected: {subscriber.connection_id}")

    def disconnect(self, connection_id: str) -> None:
        """Forget a connection and all of its group memberships."""
        with self._lock:
            self._subscribers.pop(connection_id, None)
            self._memberships.pop(connection_id, None)
        logger.debug(f"Subscriber disconnected: {connection_id}")

    def join(self, connection_id: str, group_key: str) -> bool:
        """
        Add a connection to a group.

        Idempotent. Returns False if the connection is not registered.
        """
        with self._lock:
            groups = self._memberships.get(connection_id)
            if groups is None:
                return False
            groups.add(group_key)
        logger.debug(f"{connection_id} joined {group_key}")
        return True

    def leave(self, connection_id: str, group_key: str) -> bool:
        """Remove a connection from a group. Idempotent."""
        with self._lock:
            groups = self._memberships.get(connection_id)
            if groups is None:
                return False
            groups.discard(group_key)
        logger.debug(f"{connection_id} left {group_key}")
        return True

    def members(self, group_key: str) -> set[str]:
        """Connection ids currently in ``group_key``."""
        with self._lock:
            return {cid for cid, groups in self._memberships.items() if group_key in groups}

    def groups_of(self, connection_id: str) -> set[str]:
        with self._lock:
            return set(self._memberships.get(connection_id, ()))

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    # ==========================================================================
    # PUBLISHING
    # ==========================================================================

    async def broadcast_all(self, event: str, payload: Any) -> DeliveryResult:
        with self._lock:
            targets = list(self._subscribers.values())
        return await self._deliver(targets, event, payload)

    async def send_to_group(self, group_key: str, event: str, payload: Any) -> DeliveryResult:
        with self._lock:
            targets = [
                self._subscribers[cid]
                for cid, groups in self._memberships.items()
                if group_key in groups and cid in self._subscribers
            ]
        return await self._deliver(targets, event, payload, group_key=group_key)

    async def _deliver(
        self,
        targets: list[Subscriber],
        event: str,
        payload: Any,
        group_key: Optional[str] = None,
    ) -> DeliveryResult:
        result = DeliveryResult(event=event)
        if self._closed or not targets:
            return result

        outcomes = await asyncio.gather(
            *(subscriber.send(event, payload) for subscriber in targets),
            return_exceptions=True,
        )

        for subscriber, outcome in zip(targets, outcomes):
            if isinstance(outcome, Exception):
                logger.warning(
                    f"Dropping subscriber {subscriber.connection_id} "
                    f"after failed '{event}' delivery: {outcome}"
                )
                result.failed.append(subscriber.connection_id)
                self.disconnect(subscriber.connection_id)
            else:
                result.delivered += 1

        scope = group_key or "all"
        logger.info(f"Event '{event}' -> {scope}: {result.delivered} delivered, {len(result.failed)} failed")
        return result

    # ==========================================================================
    # LIFECYCLE
    # ==========================================================================

    def close(self) -> None:
        """Drop every subscriber; further publishes are no-ops."""
        with self._lock:
            count = len(self._subscribers)
            self._subscribers.clear()
            self._memberships.clear()
            self._closed = True
        logger.info(f"NotificationHub closed ({count} subscribers dropped)")
