"""Pure filtering and statistics over the notification collection."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from notification_hub.domain.entities import NOTIFICATION_TYPES, Notification

FILTER_ALL = "all"
STATUS_UNREAD = "unread"
STATUS_READ = "read"

FILTER_STATUSES = (FILTER_ALL, STATUS_UNREAD, STATUS_READ)
FILTER_TYPES = (FILTER_ALL, *NOTIFICATION_TYPES)


@dataclass(frozen=True)
class NotificationFilter:
    """Criteria selected in the notification drawer."""

    type: str = FILTER_ALL
    status: str = FILTER_ALL
    search: str = ""

    def __post_init__(self) -> None:
        if self.type not in FILTER_TYPES:
            raise ValueError(f"Unsupported notification type filter: {self.type!r}")
        if self.status not in FILTER_STATUSES:
            raise ValueError(f"Unsupported notification status filter: {self.status!r}")

    @classmethod
    def from_mapping(cls, criteria: Mapping[str, Any] | None) -> "NotificationFilter":
        criteria = criteria or {}
        return cls(
            type=criteria.get("type") or FILTER_ALL,
            status=criteria.get("status") or FILTER_ALL,
            search=criteria.get("search") or "",
        )


@dataclass
class NotificationStats:
    total: int = 0
    unread: int = 0
    read: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    by_status: dict[str, int] = field(default_factory=dict)


def filter_notifications(
    notifications: Iterable[Notification],
    criteria: NotificationFilter | Mapping[str, Any] | None = None,
) -> list[Notification]:
    """Return the notifications matching ``criteria`` in their original order."""

    if not isinstance(criteria, NotificationFilter):
        criteria = NotificationFilter.from_mapping(criteria)

    needle = criteria.search.casefold()
    return [
        notification
        for notification in notifications
        if _matches_type(notification, criteria.type)
        and _matches_status(notification, criteria.status)
        and _matches_search(notification, needle)
    ]


def compute_stats(notifications: Iterable[Notification]) -> NotificationStats:
    """Summarize ``notifications`` by read state, type and delivery status."""

    items = list(notifications)
    unread = sum(1 for notification in items if notification.read_at is None)
    return NotificationStats(
        total=len(items),
        unread=unread,
        read=len(items) - unread,
        by_type=dict(Counter(notification.type for notification in items)),
        by_status=dict(Counter(notification.status for notification in items)),
    )


def _matches_type(notification: Notification, wanted: str) -> bool:
    return wanted == FILTER_ALL or notification.type == wanted


def _matches_status(notification: Notification, wanted: str) -> bool:
    if wanted == STATUS_UNREAD:
        return notification.read_at is None
    if wanted == STATUS_READ:
        return notification.read_at is not None
    return True


def _matches_search(notification: Notification, needle: str) -> bool:
    if not needle:
        return True
    return needle in (notification.title or "").casefold() or needle in (
        notification.message or ""
    ).casefold()


__all__ = [
    "FILTER_ALL",
    "FILTER_STATUSES",
    "FILTER_TYPES",
    "NotificationFilter",
    "NotificationStats",
    "STATUS_READ",
    "STATUS_UNREAD",
    "compute_stats",
    "filter_notifications",
]
