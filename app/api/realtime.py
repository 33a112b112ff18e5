"""
Real-time Channel

WebSocket endpoint ``/ws``. Every connected client receives broadcasts;
clients follow a single order by sending

    {"event": "join_order", "data": <order id>}
    {"event": "leave_order", "data": <order id>}

Group membership is not authorized: any client may follow any order id.
"""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.services.notifications import (
    JOIN_ORDER,
    LEAVE_ORDER,
    NotificationHub,
    WebSocketSubscriber,
    order_group,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])


def handle_client_event(hub: NotificationHub, connection_id: str, message) -> None:
    """Apply one client frame to the hub; malformed frames are ignored."""
    if not isinstance(message, dict):
        return

    event = message.get("event")
    order_id = message.get("data")
    if not order_id:
        return

    if event == JOIN_ORDER:
        hub.join(connection_id, order_group(order_id))
    elif event == LEAVE_ORDER:
        hub.leave(connection_id, order_group(order_id))


@router.websocket("/ws")
async def realtime(websocket: WebSocket) -> None:
    hub: NotificationHub = websocket.app.state.hub
    await websocket.accept()

    subscriber = WebSocketSubscriber(websocket)
    hub.connect(subscriber)
    logger.info(f"Realtime client connected: {subscriber.connection_id}")

    try:
        while True:
            try:
                message = await websocket.receive_json()
            except (ValueError, KeyError):
                logger.debug(f"Ignoring non-JSON frame from {subscriber.connection_id}")
                continue
            handle_client_event(hub, subscriber.connection_id, message)
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(subscriber.connection_id)
        logger.info(f"Realtime client disconnected: {subscriber.connection_id}")
