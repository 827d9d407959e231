"""Client-side notification collection merging baseline fetches and pushes."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime
from typing import Any

from notification_hub.domain.entities import EventKind, Notification
from notification_hub.infrastructure.notifications import (
    EventDispatcher,
    InvalidNotificationPayload,
    Unsubscribe,
    extract_notification_id,
    parse_notification,
)
from notification_hub.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

PUSH_NEW = "new"
PUSH_UPDATE = "update"
PUSH_DELETE = "delete"

_PUSH_KINDS = {
    PUSH_NEW: PUSH_NEW,
    PUSH_UPDATE: PUSH_UPDATE,
    PUSH_DELETE: PUSH_DELETE,
    EventKind.NOTIFICATION_NEW: PUSH_NEW,
    EventKind.NOTIFICATION_UPDATE: PUSH_UPDATE,
    EventKind.NOTIFICATION_DELETE: PUSH_DELETE,
}


class NotificationStore:
    """Ordered, id-unique collection of the user's notifications.

    The collection is newest-first: pushed notifications are prepended while
    baseline order is kept as fetched. ``read_at`` only ever moves from unset
    to set. Locally deleted ids stay hidden from later baselines until the
    server confirms the deletion, and ids deleted by push since the last
    baseline are not resurrected by it.
    """

    def __init__(self) -> None:
        self._items: dict[str, Notification] = {}
        self._pending_deletes: set[str] = set()
        self._pushed_since_hydrate: set[str] = set()
        self._deleted_since_hydrate: set[str] = set()
        self._unsubscribers: list[Unsubscribe] = []

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, notification_id: object) -> bool:
        return notification_id in self._items

    def all(self) -> list[Notification]:
        return list(self._items.values())

    def get(self, notification_id: str) -> Notification | None:
        return self._items.get(notification_id)

    def unread_count(self) -> int:
        return sum(1 for notification in self._items.values() if notification.read_at is None)

    def unread_ids(self) -> list[str]:
        return [n.id for n in self._items.values() if n.read_at is None]

    @property
    def pending_deletes(self) -> frozenset[str]:
        return frozenset(self._pending_deletes)

    def hydrate(self, baseline: Iterable[Notification]) -> None:
        """Merge a freshly fetched baseline into the collection."""

        fetched: dict[str, Notification] = {}
        for notification in baseline:
            if notification.id in fetched:
                continue
            fetched[notification.id] = notification

        # the server no longer lists these ids, so their deletion is settled
        self._pending_deletes.intersection_update(fetched)

        merged: dict[str, Notification] = {}
        for notification_id, current in self._items.items():
            if notification_id in self._pushed_since_hydrate and notification_id not in fetched:
                merged[notification_id] = current

        for notification_id, incoming in fetched.items():
            if notification_id in self._pending_deletes:
                continue
            # a delete pushed while the baseline was in flight wins over it
            if notification_id in self._deleted_since_hydrate:
                continue
            current = self._items.get(notification_id)
            merged[notification_id] = _merge(current, incoming)

        self._items = merged
        self._pushed_since_hydrate.clear()
        self._deleted_since_hydrate.clear()

    def apply_push(self, kind: EventKind | str, data: Any) -> None:
        """Apply a server push of ``kind`` (``new``, ``update`` or ``delete``)."""

        push_kind = _PUSH_KINDS.get(kind)
        if push_kind is None:
            raise ValueError(f"Unsupported push kind: {kind!r}")

        if push_kind == PUSH_DELETE:
            notification_id = extract_notification_id(data)
            self._items.pop(notification_id, None)
            self._pending_deletes.discard(notification_id)
            self._pushed_since_hydrate.discard(notification_id)
            self._deleted_since_hydrate.add(notification_id)
            return

        notification = parse_notification(data)
        if notification.id in self._pending_deletes:
            return
        current = self._items.get(notification.id)
        if current is None:
            self._prepend(notification)
            self._pushed_since_hydrate.add(notification.id)
            self._deleted_since_hydrate.discard(notification.id)
        elif push_kind == PUSH_UPDATE:
            self._items[notification.id] = _merge(current, notification)

    def mark_as_read(self, notification_id: str, *, read_at: datetime | None = None) -> bool:
        """Set ``read_at`` on one notification; returns whether anything changed."""

        current = self._items.get(notification_id)
        if current is None or current.read_at is not None:
            return False
        self._items[notification_id] = replace(
            current, read_at=read_at or now_in_app_timezone()
        )
        return True

    def mark_all_as_read(self, *, read_at: datetime | None = None) -> list[str]:
        """Set ``read_at`` on every unread notification and return their ids."""

        stamp = read_at or now_in_app_timezone()
        changed = self.unread_ids()
        for notification_id in changed:
            self._items[notification_id] = replace(self._items[notification_id], read_at=stamp)
        return changed

    def delete_local(self, notification_id: str) -> bool:
        """Remove a notification locally ahead of server confirmation."""

        removed = self._items.pop(notification_id, None)
        self._pushed_since_hydrate.discard(notification_id)
        if removed is None:
            return False
        self._pending_deletes.add(notification_id)
        return True

    def attach(self, dispatcher: EventDispatcher) -> None:
        """Subscribe the store to the notification push kinds of ``dispatcher``."""

        self.detach()
        for kind in (
            EventKind.NOTIFICATION_NEW,
            EventKind.NOTIFICATION_UPDATE,
            EventKind.NOTIFICATION_DELETE,
        ):
            self._unsubscribers.append(dispatcher.subscribe(kind, self._push_handler(kind)))

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def _push_handler(self, kind: EventKind):
        def handle(payload: Any) -> None:
            try:
                self.apply_push(kind, payload)
            except InvalidNotificationPayload as exc:
                logger.warning("Ignoring malformed %s push: %s", kind.value, exc)

        return handle

    def _prepend(self, notification: Notification) -> None:
        items = {notification.id: notification}
        items.update(self._items)
        self._items = items


def _merge(current: Notification | None, incoming: Notification) -> Notification:
    """Take ``incoming``'s fields while never clearing an existing ``read_at``."""

    if current is None:
        return incoming
    return replace(
        incoming,
        created_at=incoming.created_at or current.created_at,
        read_at=incoming.read_at or current.read_at,
    )


__all__ = ["NotificationStore", "PUSH_DELETE", "PUSH_NEW", "PUSH_UPDATE"]
