"""Lifecycle management for the single realtime channel of a signed-in user."""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Callable, Set

from notification_hub.config import Settings
from notification_hub.domain.entities import (
    OUTBOUND_NOTIFICATION_ACKNOWLEDGE,
    OUTBOUND_NOTIFICATION_READ,
    OUTBOUND_USER_ONLINE,
    SERVER_EVENT_KINDS,
    ConnectionState,
    ConnectionStatus,
    EventKind,
    UserSession,
)
from notification_hub.utils import now_in_app_timezone

from .dispatcher import EventDispatcher
from .scheduling import AsyncioScheduler, Scheduler, TimerHandle, backoff_delay
from .transport import Transport, socketio_transport_factory

logger = logging.getLogger(__name__)

TransportFactory = Callable[[], Transport]

DEFAULT_MAX_RECONNECT_ATTEMPTS = 5


class ConnectionManager:
    """Own the realtime transport and drive its reconnection state machine.

    Status moves ``disconnected -> connecting -> connected``. A transport error
    or close returns to ``connecting`` and schedules a retry after
    ``base_delay * 2 ** (attempt - 1)`` seconds. Once ``max_attempts`` retries
    have been used the manager settles in ``disconnected`` until ``connect``
    is called again.

    Every :meth:`connect` and :meth:`disconnect` bumps ``generation``. Timers and
    transport callbacks remember the generation they were created for and do
    nothing once it is no longer current.

    Transport failures are never raised to callers; they are only visible
    through :meth:`get_status`, :attr:`reconnect_attempts` and the
    ``connection:status`` events published on the dispatcher.
    """

    def __init__(
        self,
        dispatcher: EventDispatcher,
        transport_factory: TransportFactory,
        *,
        endpoint: str,
        scheduler: Scheduler | None = None,
        base_delay: float = 1.0,
        max_attempts: int = DEFAULT_MAX_RECONNECT_ATTEMPTS,
    ) -> None:
        self._dispatcher = dispatcher
        self._transport_factory = transport_factory
        self._endpoint = endpoint
        self._scheduler = scheduler or AsyncioScheduler()
        self._base_delay = base_delay
        self._max_attempts = max_attempts

        self._transport: Transport | None = None
        self._session: UserSession | None = None
        self._status = ConnectionStatus.DISCONNECTED
        self._reconnect_attempts = 0
        self._generation = 0
        self._timer: TimerHandle | None = None
        self._tasks: Set[asyncio.Task[Any]] = set()

    @classmethod
    def from_settings(
        cls,
        dispatcher: EventDispatcher,
        settings: Settings,
        *,
        transport_factory: TransportFactory | None = None,
        scheduler: Scheduler | None = None,
    ) -> "ConnectionManager":
        factory = transport_factory or socketio_transport_factory(
            socketio_path=settings.socket_path, wait_timeout=settings.api_timeout
        )
        return cls(
            dispatcher,
            factory,
            endpoint=settings.socket_url or "",
            scheduler=scheduler,
            base_delay=settings.reconnect_base_delay,
            max_attempts=settings.max_reconnect_attempts,
        )

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    @property
    def is_connected(self) -> bool:
        return self._status is ConnectionStatus.CONNECTED

    @property
    def session(self) -> UserSession | None:
        return self._session

    def get_status(self) -> ConnectionStatus:
        return self._status

    def get_state(self) -> ConnectionState:
        return ConnectionState(
            status=self._status,
            reconnect_attempts=self._reconnect_attempts,
            generation=self._generation,
        )

    async def connect(self, session: UserSession) -> None:
        """Open the channel for ``session``; a no-op when it is already connected."""

        if (
            self._status is ConnectionStatus.CONNECTED
            and self._transport is not None
            and self._session == session
        ):
            logger.debug("Realtime channel already connected for user %s", session.user_id)
            return

        generation = self._next_generation()
        await self._release_transport()
        if generation != self._generation:
            return

        self._session = session
        transport = self._transport_factory()
        self._transport = transport
        self._bind(transport, generation)
        await self._open(generation)

    async def disconnect(self) -> None:
        """Close the channel and invalidate any pending reconnection."""

        self._next_generation()
        await self._release_transport()
        self._session = None
        self._set_status(ConnectionStatus.DISCONNECTED)

    async def dispose(self) -> None:
        """Disconnect and cancel background work owned by the manager."""

        await self.disconnect()
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    def emit(self, event: str, data: Any) -> bool:
        """Fire-and-forget ``event``; dropped unless the channel is connected."""

        transport = self._transport
        if transport is None or self._status is not ConnectionStatus.CONNECTED:
            logger.debug("Dropping outbound %s event; channel is not connected", event)
            return False
        try:
            transport.emit(event, data)
        except Exception as exc:
            logger.warning("Failed to emit %s event: %s", event, exc)
            return False
        return True

    def acknowledge(self, notification_id: str) -> bool:
        return self.emit(OUTBOUND_NOTIFICATION_ACKNOWLEDGE, {"notificationId": notification_id})

    def send_read(self, notification_id: str) -> bool:
        return self.emit(OUTBOUND_NOTIFICATION_READ, {"notificationId": notification_id})

    def _next_generation(self) -> int:
        self._generation += 1
        self._cancel_timer()
        return self._generation

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _bind(self, transport: Transport, generation: int) -> None:
        transport.on("connect", partial(self._on_connect, generation))
        transport.on("disconnect", partial(self._on_disconnect, generation))
        transport.on("connect_error", partial(self._on_connect_error, generation))
        for kind in SERVER_EVENT_KINDS:
            transport.on(kind.value, partial(self._forward, generation, kind))

    async def _open(self, generation: int) -> None:
        transport = self._transport
        if transport is None or generation != self._generation or self._session is None:
            return

        self._set_status(ConnectionStatus.CONNECTING)
        auth = {"token": self._session.token, "userId": self._session.user_id}
        try:
            await transport.open(self._endpoint, auth)
        except Exception as exc:
            logger.warning("Realtime connection attempt failed: %s", exc)
            self._handle_transport_failure(generation)
            return

        # disconnect() or a newer connect() ran while the handshake was pending
        if generation != self._generation or self._transport is not transport:
            logger.debug("Closing transport opened for stale generation %s", generation)
            await self._close_transport(transport)

    async def _release_transport(self) -> None:
        transport = self._transport
        self._transport = None
        if transport is not None:
            await self._close_transport(transport)

    async def _close_transport(self, transport: Transport) -> None:
        try:
            await transport.close()
        except Exception as exc:
            logger.warning("Error while closing realtime transport: %s", exc)

    def _on_connect(self, generation: int, *_: Any) -> None:
        if generation != self._generation:
            return
        self._cancel_timer()
        self._reconnect_attempts = 0
        self._set_status(ConnectionStatus.CONNECTED)
        logger.info("Connected to notification service")
        self.emit(OUTBOUND_USER_ONLINE, {"timestamp": now_in_app_timezone().isoformat()})

    def _on_disconnect(self, generation: int, *args: Any) -> None:
        if generation != self._generation:
            return
        reason = args[0] if args else None
        logger.info("Disconnected from notification service: %s", reason)
        self._handle_transport_failure(generation)

    def _on_connect_error(self, generation: int, *args: Any) -> None:
        if generation != self._generation:
            return
        logger.error("Notification service connection error: %s", args[0] if args else None)
        self._handle_transport_failure(generation)

    def _forward(self, generation: int, kind: EventKind, *args: Any) -> None:
        if generation != self._generation:
            return
        self._dispatcher.dispatch(kind, args[0] if args else None)

    def _handle_transport_failure(self, generation: int) -> None:
        if generation != self._generation or self._transport is None:
            return
        # a retry is already pending, or the manager gave up on this generation
        if self._timer is not None:
            return
        if self._status is ConnectionStatus.DISCONNECTED:
            return

        if self._reconnect_attempts >= self._max_attempts:
            logger.error(
                "Max reconnection attempts reached (%s); giving up", self._max_attempts
            )
            self._set_status(ConnectionStatus.DISCONNECTED)
            return

        self._reconnect_attempts += 1
        delay = backoff_delay(self._reconnect_attempts, self._base_delay)
        self._set_status(ConnectionStatus.CONNECTING)
        self._timer = self._scheduler.call_later(delay, self._fire_reconnect, generation)

    def _fire_reconnect(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug("Ignoring reconnect timer from generation %s", generation)
            return
        self._timer = None
        if self._status is ConnectionStatus.CONNECTED:
            return
        logger.info(
            "Attempting to reconnect (%s/%s)", self._reconnect_attempts, self._max_attempts
        )
        self._spawn(self._open(generation))

    def _spawn(self, coroutine: Any) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _set_status(self, status: ConnectionStatus) -> None:
        self._status = status
        self._dispatcher.dispatch(EventKind.CONNECTION_STATUS, self.get_state())


__all__ = ["ConnectionManager", "DEFAULT_MAX_RECONNECT_ATTEMPTS", "TransportFactory"]
