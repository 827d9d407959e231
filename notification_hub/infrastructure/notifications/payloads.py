"""Conversion between wire payloads and :class:`Notification` entities."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from notification_hub.domain.entities import (
    NOTIFICATION_STATUS_SENT,
    NOTIFICATION_TYPE_IN_APP,
    PRIORITY_NORMAL,
    Notification,
)
from notification_hub.utils import ensure_app_timezone, isoformat_or_none

_ID_KEYS = ("id", "_id", "notificationId")


class InvalidNotificationPayload(ValueError):
    """Raised when a pushed or fetched payload cannot describe a notification."""


class NotificationPayload(BaseModel):
    """Camel-cased notification document exchanged with the backend."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(validation_alias=AliasChoices("id", "_id"), min_length=1)
    type: str = NOTIFICATION_TYPE_IN_APP
    title: str = ""
    message: str = ""
    status: str = NOTIFICATION_STATUS_SENT
    created_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("createdAt", "created_at")
    )
    read_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("readAt", "read_at")
    )
    priority: str = PRIORITY_NORMAL
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("type", "title", "message", "status", "priority", mode="before")
    @classmethod
    def _default_missing_text(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("metadata", mode="before")
    @classmethod
    def _stringify_metadata(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return {str(key): "" if item is None else str(item) for key, item in value.items()}
        return value

    def to_entity(self) -> Notification:
        return Notification(
            id=self.id,
            type=self.type,
            title=self.title,
            message=self.message,
            status=self.status,
            created_at=ensure_app_timezone(self.created_at),
            read_at=ensure_app_timezone(self.read_at),
            priority=self.priority,
            metadata=dict(self.metadata),
        )


def parse_notification(data: Any) -> Notification:
    """Return a :class:`Notification` for ``data``.

    ``data`` may already be an entity, or a mapping in the backend format.
    """

    if isinstance(data, Notification):
        return data
    if not isinstance(data, Mapping):
        msg = f"Expected a notification mapping, got {type(data).__name__}"
        raise InvalidNotificationPayload(msg)
    try:
        payload = NotificationPayload.model_validate(dict(data))
    except ValidationError as exc:
        raise InvalidNotificationPayload(str(exc)) from exc
    return payload.to_entity()


def parse_notifications(items: Any) -> list[Notification]:
    """Parse a baseline list, rejecting anything that is not a list."""

    if not isinstance(items, list):
        msg = f"Expected a list of notifications, got {type(items).__name__}"
        raise InvalidNotificationPayload(msg)
    return [parse_notification(item) for item in items]


def extract_notification_id(data: Any) -> str:
    """Return the notification identifier carried by a delete-style payload."""

    if isinstance(data, Notification):
        return data.id
    if isinstance(data, (str, int)) and not isinstance(data, bool):
        identifier = str(data)
        if identifier:
            return identifier
    if isinstance(data, Mapping):
        for key in _ID_KEYS:
            value = data.get(key)
            if isinstance(value, (str, int)) and not isinstance(value, bool) and str(value):
                return str(value)
    msg = f"Payload does not carry a notification id: {data!r}"
    raise InvalidNotificationPayload(msg)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the camel-cased JSON representation of ``notification``."""

    return {
        "id": notification.id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "status": notification.status,
        "createdAt": isoformat_or_none(notification.created_at),
        "readAt": isoformat_or_none(notification.read_at),
        "priority": notification.priority,
        "metadata": dict(notification.metadata),
    }


__all__ = [
    "InvalidNotificationPayload",
    "NotificationPayload",
    "extract_notification_id",
    "parse_notification",
    "parse_notifications",
    "serialize_notification",
]
