"""In-process real-time hub delivering events to connected users over WebSockets."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from fastapi import WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)


class RealtimeHub(Protocol):
    """Anything that can push an event to a single user."""

    async def push_to_user(self, user_id: int, event_name: str, payload: Mapping[str, Any]) -> None:
        """Deliver ``payload`` to ``user_id`` if connected; no-op otherwise."""


class ConnectionManager:
    """Track WebSocket connections per user and fan events out to them."""

    def __init__(self) -> None:
        # user_id -> active connections (one per open tab/device)
        self.active_connections: dict[int, list[WebSocket]] = {}

    async def connect(self, user_id: int, websocket: WebSocket) -> None:
        """Accept and register a WebSocket connection."""
        await websocket.accept()
        self.active_connections.setdefault(user_id, []).append(websocket)
        logger.info("WebSocket connected for user %s", user_id)

    def disconnect(self, user_id: int, websocket: WebSocket) -> None:
        """Forget a WebSocket connection."""
        connections = self.active_connections.get(user_id)
        if connections is None:
            return
        if websocket in connections:
            connections.remove(websocket)
        if not connections:
            del self.active_connections[user_id]
        logger.info("WebSocket disconnected for user %s", user_id)

    def is_connected(self, user_id: int) -> bool:
        return bool(self.active_connections.get(user_id))

    async def push_to_user(self, user_id: int, event_name: str, payload: Mapping[str, Any]) -> None:
        """Send an event to every connection of ``user_id``.

        Connections that fail to receive are dropped; the remaining ones still
        get the message. Users without a connection are silently skipped.
        """
        if not self.is_connected(user_id):
            logger.debug("User %s not connected; skipping %s push", user_id, event_name)
            return
        connections = list(self.active_connections[user_id])

        message = {"type": event_name, "data": jsonable_encoder(dict(payload))}
        stale: list[WebSocket] = []
        for connection in connections:
            try:
                await connection.send_json(message)
            except (WebSocketDisconnect, RuntimeError, OSError) as err:
                logger.warning("Dropping WebSocket for user %s after send failure: %s", user_id, err)
                stale.append(connection)

        for connection in stale:
            self.disconnect(user_id, connection)


# Global connection manager instance
manager = ConnectionManager()


def get_hub() -> ConnectionManager:
    """Return the process-wide hub."""
    return manager
