"""Realtime notification helpers for the infrastructure layer."""

from .api_client import NotificationApiError, NotificationsApi
from .connection import ConnectionManager, TransportFactory
from .desktop import (
    DesktopAction,
    DesktopNotificationOptions,
    DesktopNotifier,
    DesktopPlatform,
    NullDesktopPlatform,
    resolve_navigation_target,
)
from .dispatcher import EventDispatcher, Subscriber, Unsubscribe
from .manager import UiConnectionManager
from .payloads import (
    InvalidNotificationPayload,
    NotificationPayload,
    extract_notification_id,
    parse_notification,
    parse_notifications,
    serialize_notification,
)
from .realtime import UiEventRelay, serialize_event
from .scheduling import AsyncioScheduler, Scheduler, TimerHandle, backoff_delay
from .transport import SocketIOTransport, Transport, TransportError, socketio_transport_factory

__all__ = [
    "NotificationApiError",
    "NotificationsApi",
    "ConnectionManager",
    "TransportFactory",
    "DesktopAction",
    "DesktopNotificationOptions",
    "DesktopNotifier",
    "DesktopPlatform",
    "NullDesktopPlatform",
    "resolve_navigation_target",
    "EventDispatcher",
    "Subscriber",
    "Unsubscribe",
    "UiConnectionManager",
    "InvalidNotificationPayload",
    "NotificationPayload",
    "extract_notification_id",
    "parse_notification",
    "parse_notifications",
    "serialize_notification",
    "UiEventRelay",
    "serialize_event",
    "AsyncioScheduler",
    "Scheduler",
    "TimerHandle",
    "backoff_delay",
    "SocketIOTransport",
    "Transport",
    "TransportError",
    "socketio_transport_factory",
]
