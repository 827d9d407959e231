"""Pydantic models describing the payloads served to the console UI."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from notification_hub.application.use_cases.notifications import NotificationStats
from notification_hub.domain.entities import ConnectionState, Notification


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the UI."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str
    title: str
    message: str
    status: str
    created_at: datetime | None = Field(default=None, alias="createdAt")
    read_at: datetime | None = Field(default=None, alias="readAt")
    priority: str
    metadata: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        return cls(
            id=notification.id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            status=notification.status,
            created_at=notification.created_at,
            read_at=notification.read_at,
            priority=notification.priority,
            metadata=dict(notification.metadata),
        )


class UnreadCountRead(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    """Identifiers updated by a mark-all-as-read request."""

    updated: list[str] = Field(default_factory=list)


class NotificationStatsRead(BaseModel):
    total: int
    unread: int
    read: int
    by_type: dict[str, int] = Field(default_factory=dict)
    by_status: dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_stats(cls, stats: NotificationStats) -> "NotificationStatsRead":
        return cls(
            total=stats.total,
            unread=stats.unread,
            read=stats.read,
            by_type=dict(stats.by_type),
            by_status=dict(stats.by_status),
        )


class SessionStart(BaseModel):
    """Identity and token of the user whose notifications are synchronised."""

    user_id: str = Field(..., min_length=1)
    token: str = Field(..., min_length=1)


class ConnectionRead(BaseModel):
    status: str
    reconnect_attempts: int
    generation: int
    is_connected: bool

    @classmethod
    def from_state(cls, state: ConnectionState) -> "ConnectionRead":
        return cls(
            status=state.status.value,
            reconnect_attempts=state.reconnect_attempts,
            generation=state.generation,
            is_connected=state.is_connected,
        )


class PermissionRead(BaseModel):
    granted: bool
    permission: str


__all__ = [
    "ConnectionRead",
    "MarkAllReadResponse",
    "NotificationRead",
    "NotificationStatsRead",
    "PermissionRead",
    "SessionStart",
    "UnreadCountRead",
]
