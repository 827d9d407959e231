from .notification import (
    ConnectionRead,
    MarkAllReadResponse,
    NotificationRead,
    NotificationStatsRead,
    PermissionRead,
    SessionStart,
    UnreadCountRead,
)

__all__ = [
    "ConnectionRead",
    "MarkAllReadResponse",
    "NotificationRead",
    "NotificationStatsRead",
    "PermissionRead",
    "SessionStart",
    "UnreadCountRead",
]
