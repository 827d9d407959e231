"""Domain entities exposed by the notification hub."""

from .connection import ConnectionState, ConnectionStatus, UserSession
from .event import (
    OUTBOUND_NOTIFICATION_ACKNOWLEDGE,
    OUTBOUND_NOTIFICATION_READ,
    OUTBOUND_USER_ONLINE,
    SERVER_EVENT_KINDS,
    EventKind,
)
from .notification import (
    NOTIFICATION_STATUS_FAILED,
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUS_SENT,
    NOTIFICATION_STATUSES,
    NOTIFICATION_TYPE_EMAIL,
    NOTIFICATION_TYPE_IN_APP,
    NOTIFICATION_TYPE_SMS,
    NOTIFICATION_TYPES,
    PRIORITY_HIGH,
    PRIORITY_NORMAL,
    Notification,
)

__all__ = [
    "ConnectionState",
    "ConnectionStatus",
    "UserSession",
    "EventKind",
    "SERVER_EVENT_KINDS",
    "OUTBOUND_USER_ONLINE",
    "OUTBOUND_NOTIFICATION_ACKNOWLEDGE",
    "OUTBOUND_NOTIFICATION_READ",
    "Notification",
    "NOTIFICATION_TYPE_EMAIL",
    "NOTIFICATION_TYPE_SMS",
    "NOTIFICATION_TYPE_IN_APP",
    "NOTIFICATION_TYPES",
    "NOTIFICATION_STATUS_PENDING",
    "NOTIFICATION_STATUS_SENT",
    "NOTIFICATION_STATUS_FAILED",
    "NOTIFICATION_STATUSES",
    "PRIORITY_NORMAL",
    "PRIORITY_HIGH",
]
