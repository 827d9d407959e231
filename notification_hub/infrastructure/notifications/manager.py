"""Connection management helpers for console UI websockets."""

from __future__ import annotations

import logging
from typing import Any, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class UiConnectionManager:
    """Track the websockets of console UI views attached to this hub."""

    def __init__(self) -> None:
        self._connections: Set[WebSocket] = set()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it."""

        await websocket.accept()
        self._connections.add(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the pool."""

        self._connections.discard(websocket)

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send ``message`` to every attached UI; broken sockets are dropped."""

        for connection in list(self._connections):
            try:
                await connection.send_json(message)
            except Exception as exc:
                logger.debug("Dropping UI websocket after send failure: %s", exc)
                self.disconnect(connection)


__all__ = ["UiConnectionManager"]
