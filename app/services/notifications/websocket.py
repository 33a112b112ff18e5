"""
WebSocket Subscriber

Adapts a Starlette WebSocket to the Subscriber interface. Frames are JSON
objects: ``{"event": <name>, "data": <payload>}``.
"""

import uuid
from typing import Any

from fastapi import WebSocket

from app.services.notifications.base import Subscriber


class WebSocketSubscriber(Subscriber):
    """A connected WebSocket client."""

    def __init__(self, websocket: WebSocket):
        self._websocket = websocket
        self._connection_id = f"ws_{uuid.uuid4().hex[:12]}"

    @property
    def connection_id(self) -> str:
        return self._connection_id

    async def send(self, event: str, payload: Any) -> None:
        await self._websocket.send_json({"event": event, "data": payload})
