# src/inkwell/api/v1/endpoints/realtime.py
"""WebSocket stream delivering notifications as they are emitted.

Connect with ``ws://host/ws/notifications?token=<jwt>``. The server sends
``{"type": "notification", "data": {...}}`` for every new notification and
answers ``{"type": "ping"}`` with ``{"type": "pong"}``.
"""

import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from inkwell.core.security import InvalidTokenError, decode_actor
from inkwell.services.hub import get_hub

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws/notifications")
async def notifications_websocket(
    websocket: WebSocket,
    token: str = Query(..., description="JWT access token"),
) -> None:
    try:
        actor = decode_actor(token)
    except InvalidTokenError as err:
        logger.warning("Rejected WebSocket connection: %s", err)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Authentication failed")
        return

    hub = get_hub()
    await hub.connect(actor.user_id, websocket)
    try:
        await websocket.send_json({"type": "connected", "user_id": actor.user_id})
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                continue
            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(actor.user_id, websocket)
