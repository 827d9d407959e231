"""Kinds of events fanned out through the in-process dispatcher."""

from __future__ import annotations

from enum import Enum


class EventKind(str, Enum):
    """Event kinds; server kinds keep their wire names."""

    NOTIFICATION_NEW = "notification:new"
    NOTIFICATION_UPDATE = "notification:update"
    NOTIFICATION_DELETE = "notification:delete"
    SYSTEM_MAINTENANCE = "system:maintenance"
    SYSTEM_UPDATE = "system:update"
    CONNECTION_STATUS = "connection:status"


SERVER_EVENT_KINDS = (
    EventKind.NOTIFICATION_NEW,
    EventKind.NOTIFICATION_UPDATE,
    EventKind.NOTIFICATION_DELETE,
    EventKind.SYSTEM_MAINTENANCE,
    EventKind.SYSTEM_UPDATE,
)

OUTBOUND_USER_ONLINE = "user:online"
OUTBOUND_NOTIFICATION_ACKNOWLEDGE = "notification:acknowledge"
OUTBOUND_NOTIFICATION_READ = "notification:read"


__all__ = [
    "EventKind",
    "SERVER_EVENT_KINDS",
    "OUTBOUND_USER_ONLINE",
    "OUTBOUND_NOTIFICATION_ACKNOWLEDGE",
    "OUTBOUND_NOTIFICATION_READ",
]
