"""Domain entity representing a notification shown in the school console."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

NOTIFICATION_TYPE_EMAIL = "email"
NOTIFICATION_TYPE_SMS = "sms"
NOTIFICATION_TYPE_IN_APP = "in-app"
NOTIFICATION_TYPES = (
    NOTIFICATION_TYPE_EMAIL,
    NOTIFICATION_TYPE_SMS,
    NOTIFICATION_TYPE_IN_APP,
)

NOTIFICATION_STATUS_PENDING = "pending"
NOTIFICATION_STATUS_SENT = "sent"
NOTIFICATION_STATUS_FAILED = "failed"
NOTIFICATION_STATUSES = (
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUS_SENT,
    NOTIFICATION_STATUS_FAILED,
)

PRIORITY_NORMAL = "normal"
PRIORITY_HIGH = "high"


@dataclass
class Notification:
    """Message delivered to the signed-in user, either fetched or pushed."""

    id: str
    type: str
    title: str
    message: str
    status: str = NOTIFICATION_STATUS_SENT
    created_at: datetime | None = None
    read_at: datetime | None = None
    priority: str = PRIORITY_NORMAL
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    @property
    def is_high_priority(self) -> bool:
        return self.priority == PRIORITY_HIGH


__all__ = [
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
