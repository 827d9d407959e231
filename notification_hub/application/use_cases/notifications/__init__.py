"""Public helpers for synchronising the user's notifications."""

from .center import NotificationCenter, build_notification_center
from .filters import (
    NotificationFilter,
    NotificationStats,
    compute_stats,
    filter_notifications,
)
from .store import NotificationStore

__all__ = [
    "NotificationCenter",
    "build_notification_center",
    "NotificationFilter",
    "NotificationStats",
    "compute_stats",
    "filter_notifications",
    "NotificationStore",
]
