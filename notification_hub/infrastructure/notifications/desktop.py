"""Bridge pushed notifications into platform desktop notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from notification_hub.config import Settings
from notification_hub.domain.entities import EventKind, Notification

from .dispatcher import EventDispatcher, Unsubscribe
from .payloads import InvalidNotificationPayload, parse_notification
from .scheduling import AsyncioScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)

PERMISSION_UNSUPPORTED = "unsupported"
PERMISSION_DEFAULT = "default"
PERMISSION_GRANTED = "granted"
PERMISSION_DENIED = "denied"

DEFAULT_TITLE = "New Notification"
DEFAULT_BODY = "You have a new notification"

NAVIGATION_TARGETS = {
    "assignment": "/assignments",
    "grade": "/grades",
    "attendance": "/attendance",
    "payment": "/payments",
}
DEFAULT_NAVIGATION_TARGET = "/notifications"

ACTION_VIEW = "view"
ACTION_DISMISS = "dismiss"


def resolve_navigation_target(kind: str | None) -> str:
    """Return the console route opened when a notification of ``kind`` is clicked."""

    return NAVIGATION_TARGETS.get(kind or "", DEFAULT_NAVIGATION_TARGET)


@dataclass(frozen=True)
class DesktopAction:
    action: str
    title: str


@dataclass
class DesktopNotificationOptions:
    """Everything the platform needs to render one desktop notification."""

    title: str
    body: str
    icon: str
    tag: str
    require_interaction: bool
    actions: list[DesktopAction] = field(default_factory=list)
    data: Notification | None = None


class DesktopNotificationHandle(Protocol):
    def close(self) -> None: ...


class DesktopPlatform(Protocol):
    """Capability interface over the host's notification API."""

    def is_supported(self) -> bool: ...

    def permission(self) -> str: ...

    async def request_permission(self) -> str: ...

    def supports_actions(self) -> bool: ...

    def show(
        self,
        options: DesktopNotificationOptions,
        *,
        on_click: Callable[[], None],
        on_action: Callable[[str], None],
    ) -> DesktopNotificationHandle: ...


class _ClosedHandle:
    def close(self) -> None:
        return None


class NullDesktopPlatform:
    """Platform without desktop notification support."""

    def is_supported(self) -> bool:
        return False

    def permission(self) -> str:
        return PERMISSION_UNSUPPORTED

    async def request_permission(self) -> str:
        return PERMISSION_UNSUPPORTED

    def supports_actions(self) -> bool:
        return False

    def show(
        self,
        options: DesktopNotificationOptions,
        *,
        on_click: Callable[[], None],
        on_action: Callable[[str], None],
    ) -> DesktopNotificationHandle:
        return _ClosedHandle()


class DesktopNotifier:
    """Render ``notification:new`` events as desktop notifications.

    Rendering only happens while permission is ``granted``; otherwise events
    are skipped silently. Normal priority notifications close themselves after
    ``auto_dismiss_seconds``, high priority ones stay until the user acts.
    """

    def __init__(
        self,
        dispatcher: EventDispatcher,
        platform: DesktopPlatform | None = None,
        *,
        scheduler: Scheduler | None = None,
        auto_dismiss_seconds: float = 10.0,
        icon: str = "/favicon.ico",
        on_navigate: Callable[[str], Any] | None = None,
    ) -> None:
        self._platform = platform or NullDesktopPlatform()
        self._scheduler = scheduler or AsyncioScheduler()
        self._auto_dismiss_seconds = auto_dismiss_seconds
        self._icon = icon
        self._on_navigate = on_navigate
        self._dismiss_timers: dict[str, TimerHandle] = {}
        self._unsubscribe: Unsubscribe | None = dispatcher.subscribe(
            EventKind.NOTIFICATION_NEW, self._on_new_notification
        )

    @classmethod
    def from_settings(
        cls,
        dispatcher: EventDispatcher,
        settings: Settings,
        *,
        platform: DesktopPlatform | None = None,
        scheduler: Scheduler | None = None,
        on_navigate: Callable[[str], Any] | None = None,
    ) -> "DesktopNotifier":
        return cls(
            dispatcher,
            platform,
            scheduler=scheduler,
            auto_dismiss_seconds=settings.desktop_auto_dismiss_seconds,
            icon=settings.desktop_icon,
            on_navigate=on_navigate,
        )

    @property
    def permission(self) -> str:
        if not self._platform.is_supported():
            return PERMISSION_UNSUPPORTED
        return self._platform.permission()

    async def request_permission(self) -> bool:
        """Ask the platform for permission; must be triggered by a user gesture."""

        if not self._platform.is_supported():
            logger.warning("Desktop notifications are not supported on this platform")
            return False

        current = self._platform.permission()
        if current == PERMISSION_GRANTED:
            return True
        if current == PERMISSION_DENIED:
            logger.warning("Desktop notification permission denied")
            return False

        try:
            result = await self._platform.request_permission()
        except Exception as exc:
            logger.error("Error requesting desktop notification permission: %s", exc)
            return False
        return result == PERMISSION_GRANTED

    def show(self, notification: Notification) -> DesktopNotificationHandle | None:
        """Render ``notification`` if permission allows it."""

        if self.permission != PERMISSION_GRANTED:
            return None

        actions: list[DesktopAction] = []
        if self._platform.supports_actions():
            actions = [
                DesktopAction(action=ACTION_VIEW, title="View"),
                DesktopAction(action=ACTION_DISMISS, title="Dismiss"),
            ]

        options = DesktopNotificationOptions(
            title=notification.title or DEFAULT_TITLE,
            body=notification.message or DEFAULT_BODY,
            icon=self._icon,
            tag=notification.id,
            require_interaction=notification.is_high_priority,
            actions=actions,
            data=notification,
        )

        handle: DesktopNotificationHandle | None = None

        def on_click() -> None:
            if handle is not None:
                self._close(notification.id, handle)
            self.handle_click(notification)

        def on_action(action: str) -> None:
            if action == ACTION_VIEW:
                self.handle_click(notification)
            if handle is not None:
                self._close(notification.id, handle)

        handle = self._platform.show(options, on_click=on_click, on_action=on_action)

        previous = self._dismiss_timers.pop(notification.id, None)
        if previous is not None:
            previous.cancel()
        if not notification.is_high_priority:
            self._dismiss_timers[notification.id] = self._scheduler.call_later(
                self._auto_dismiss_seconds, self._close, notification.id, handle
            )
        return handle

    def handle_click(self, notification: Notification) -> str:
        """Route a clicked notification and return the navigation target."""

        target = resolve_navigation_target(notification.type)
        if self._on_navigate is not None:
            self._on_navigate(target)
        return target

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for timer in self._dismiss_timers.values():
            timer.cancel()
        self._dismiss_timers.clear()

    def _close(self, tag: str, handle: DesktopNotificationHandle) -> None:
        timer = self._dismiss_timers.pop(tag, None)
        if timer is not None:
            timer.cancel()
        handle.close()

    def _on_new_notification(self, payload: Any) -> None:
        try:
            notification = parse_notification(payload)
        except InvalidNotificationPayload as exc:
            logger.warning("Skipping desktop notification for malformed payload: %s", exc)
            return
        self.show(notification)


__all__ = [
    "DEFAULT_NAVIGATION_TARGET",
    "DesktopAction",
    "DesktopNotificationHandle",
    "DesktopNotificationOptions",
    "DesktopNotifier",
    "DesktopPlatform",
    "NAVIGATION_TARGETS",
    "NullDesktopPlatform",
    "PERMISSION_DEFAULT",
    "PERMISSION_DENIED",
    "PERMISSION_GRANTED",
    "PERMISSION_UNSUPPORTED",
    "resolve_navigation_target",
]
