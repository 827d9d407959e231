"""Realtime transports carrying server events to the connection manager."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Protocol, Set
from urllib.parse import urlencode

import socketio
from socketio import exceptions as socketio_exceptions

logger = logging.getLogger(__name__)

DEFAULT_TRANSPORTS = ("websocket", "polling")


class TransportError(ConnectionError):
    """Raised by a transport when the channel cannot be opened."""


class Transport(Protocol):
    """Minimal contract the connection manager needs from a realtime channel."""

    @property
    def connected(self) -> bool: ...

    def on(self, event: str, handler: Callable[..., Any]) -> None: ...

    async def open(self, endpoint: str, auth: Mapping[str, str]) -> None: ...

    async def close(self) -> None: ...

    def emit(self, event: str, data: Any) -> None: ...


class SocketIOTransport:
    """Socket.IO client transport.

    The client's own reconnection is disabled; retries are driven by
    :class:`~notification_hub.infrastructure.notifications.connection.ConnectionManager`.
    """

    def __init__(
        self,
        *,
        transports: Sequence[str] = DEFAULT_TRANSPORTS,
        socketio_path: str = "socket.io",
        wait_timeout: float = 10,
        client: socketio.AsyncClient | None = None,
    ) -> None:
        self._client = client or socketio.AsyncClient(
            reconnection=False, logger=False, engineio_logger=False
        )
        self._transports = list(transports)
        self._socketio_path = socketio_path
        self._wait_timeout = wait_timeout
        self._pending: Set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def connected(self) -> bool:
        return bool(self._client.connected)

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self._client.on(event, handler)

    async def open(self, endpoint: str, auth: Mapping[str, str]) -> None:
        self._closed = False
        query = {"userId": auth["userId"]} if auth.get("userId") else {}
        url = f"{endpoint}?{urlencode(query)}" if query else endpoint
        try:
            await self._client.connect(
                url,
                auth=dict(auth),
                transports=self._transports,
                socketio_path=self._socketio_path,
                wait_timeout=self._wait_timeout,
            )
        except socketio_exceptions.ConnectionError as exc:
            raise TransportError(str(exc)) from exc
        if self._closed:
            # close() was called while the handshake was in flight
            await self._client.disconnect()

    async def close(self) -> None:
        """Disconnect the client, including one whose handshake is still pending."""

        self._closed = True
        await self._client.disconnect()

    def emit(self, event: str, data: Any) -> None:
        """Send ``event`` without waiting for the write to complete."""

        loop = asyncio.get_running_loop()
        task = loop.create_task(self._client.emit(event, data))
        self._pending.add(task)
        task.add_done_callback(self._finish_emit)

    def _finish_emit(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Failed to emit realtime event: %s", exc)


def socketio_transport_factory(
    *, socketio_path: str = "socket.io", wait_timeout: float = 10
) -> Callable[[], SocketIOTransport]:
    """Return a factory creating a fresh :class:`SocketIOTransport` per connection."""

    def factory() -> SocketIOTransport:
        return SocketIOTransport(socketio_path=socketio_path, wait_timeout=wait_timeout)

    return factory


__all__ = [
    "DEFAULT_TRANSPORTS",
    "SocketIOTransport",
    "Transport",
    "TransportError",
    "socketio_transport_factory",
]
