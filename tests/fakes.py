"""In-memory doubles for the transport, scheduler and desktop platform."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

import anyio

from notification_hub.infrastructure.notifications import (
    NotificationApiError,
    TransportError,
    parse_notifications,
)
from notification_hub.infrastructure.notifications.desktop import (
    PERMISSION_DEFAULT,
    PERMISSION_GRANTED,
    DesktopNotificationOptions,
)


class FakeTimer:
    def __init__(self, delay: float, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self.delay = delay
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        """Run the callback even if cancelled, as a late-firing timer would."""

        self.fired = True
        self.callback(*self.args)


class FakeScheduler:
    """Record timers and let tests fire them explicitly."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> FakeTimer:
        timer = FakeTimer(delay, callback, args)
        self.timers.append(timer)
        return timer

    @property
    def delays(self) -> list[float]:
        return [timer.delay for timer in self.timers]

    def pending(self) -> list[FakeTimer]:
        return [timer for timer in self.timers if not timer.cancelled and not timer.fired]

    def advance(self, seconds: float) -> None:
        """Fire every live timer whose delay fits in ``seconds``."""

        for timer in self.pending():
            if timer.delay <= seconds:
                timer.fire()


class FakeTransport:
    """Transport whose outcome is scripted by the test."""

    def __init__(self, *, succeed: bool = True) -> None:
        self.succeed = succeed
        self.handlers: dict[str, Callable[..., Any]] = {}
        self.open_calls: list[tuple[str, dict[str, str]]] = []
        self.emitted: list[tuple[str, Any]] = []
        self.close_calls = 0
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def open_count(self) -> int:
        return len(self.open_calls)

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self.handlers[event] = handler

    async def open(self, endpoint: str, auth: Mapping[str, str]) -> None:
        self.open_calls.append((endpoint, dict(auth)))
        if not self.succeed:
            raise TransportError("connection refused")
        self._connected = True
        self.fire("connect")

    async def close(self) -> None:
        self.close_calls += 1
        was_connected = self._connected
        self._connected = False
        if was_connected:
            self.fire("disconnect", "io client disconnect")

    def emit(self, event: str, data: Any) -> None:
        self.emitted.append((event, data))

    def fire(self, event: str, *args: Any) -> None:
        handler = self.handlers.get(event)
        if handler is not None:
            handler(*args)

    def drop(self, reason: str = "transport close") -> None:
        """Simulate the server closing the channel."""

        self._connected = False
        self.fire("disconnect", reason)


class SlowOpeningTransport(FakeTransport):
    """Transport whose handshake stays pending until ``release`` is set."""

    def __init__(self, *, succeed: bool = True) -> None:
        super().__init__(succeed=succeed)
        self.opening = anyio.Event()
        self.release = anyio.Event()

    async def open(self, endpoint: str, auth: Mapping[str, str]) -> None:
        self.open_calls.append((endpoint, dict(auth)))
        self.opening.set()
        await self.release.wait()
        self._connected = True
        self.fire("connect")


class TransportFactory:
    """Hand out fresh transports and remember them."""

    def __init__(
        self, *, succeed: bool = True, transport_class: type[FakeTransport] = FakeTransport
    ) -> None:
        self.succeed = succeed
        self.transport_class = transport_class
        self.created: list[FakeTransport] = []

    def __call__(self) -> FakeTransport:
        transport = self.transport_class(succeed=self.succeed)
        self.created.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.created[-1]


class FakeDesktopHandle:
    def __init__(self, options: DesktopNotificationOptions, on_click, on_action) -> None:
        self.options = options
        self.on_click = on_click
        self.on_action = on_action
        self.closed = False

    def close(self) -> None:
        self.closed = True


class FakeDesktopPlatform:
    """Desktop platform double recording every rendered notification."""

    def __init__(
        self,
        *,
        permission: str = PERMISSION_GRANTED,
        supported: bool = True,
        actions: bool = True,
        grant_on_request: str = PERMISSION_GRANTED,
    ) -> None:
        self._permission = permission
        self._supported = supported
        self._actions = actions
        self._grant_on_request = grant_on_request
        self.requests = 0
        self.shown: list[FakeDesktopHandle] = []

    def is_supported(self) -> bool:
        return self._supported

    def permission(self) -> str:
        return self._permission

    async def request_permission(self) -> str:
        self.requests += 1
        if self._permission == PERMISSION_DEFAULT:
            self._permission = self._grant_on_request
        return self._permission

    def supports_actions(self) -> bool:
        return self._actions

    def show(self, options, *, on_click, on_action) -> FakeDesktopHandle:
        handle = FakeDesktopHandle(options, on_click, on_action)
        self.shown.append(handle)
        return handle


class FakeNotificationsApi:
    """REST collaborator double."""

    def __init__(self, baseline: list[dict[str, Any]] | None = None) -> None:
        self.baseline = baseline or []
        self.fail_list = False
        self.fail_mutations = False
        self.token: str | None = None
        self.list_calls: list[tuple[str, int]] = []
        self.read_calls: list[str] = []
        self.read_all_calls: list[list[str]] = []
        self.closed = False
        self.list_started: anyio.Event | None = None
        self.list_gate: anyio.Event | None = None

    def hold_list(self) -> None:
        """Make the next ``list`` call wait for ``list_gate`` after snapshotting."""

        self.list_started = anyio.Event()
        self.list_gate = anyio.Event()

    def set_token(self, token: str | None) -> None:
        self.token = token

    async def list(self, user_id: str, *, limit: int = 100):
        self.list_calls.append((user_id, limit))
        snapshot = list(self.baseline)
        if self.list_gate is not None:
            self.list_started.set()
            await self.list_gate.wait()
        if self.fail_list:
            raise NotificationApiError("backend unavailable", status_code=503)
        return parse_notifications(snapshot)

    async def mark_read(self, notification_id: str) -> dict[str, Any]:
        self.read_calls.append(notification_id)
        if self.fail_mutations:
            raise NotificationApiError("cannot mark as read", status_code=500)
        return {"success": True}

    async def mark_all_read(self, notification_ids) -> dict[str, Any]:
        ids = list(notification_ids)
        self.read_all_calls.append(ids)
        if self.fail_mutations:
            raise NotificationApiError("cannot mark all as read", status_code=500)
        return {"success": True, "data": {"updated": len(ids)}}

    async def aclose(self) -> None:
        self.closed = True


def make_payload(notification_id: str, **overrides: Any) -> dict[str, Any]:
    """Return a backend-shaped notification document."""

    payload: dict[str, Any] = {
        "id": notification_id,
        "type": "in-app",
        "title": f"Notification {notification_id}",
        "message": f"Message for {notification_id}",
        "status": "sent",
        "createdAt": "2026-10-01T08:00:00Z",
        "readAt": None,
        "priority": "normal",
        "metadata": {},
    }
    payload.update(overrides)
    return payload
