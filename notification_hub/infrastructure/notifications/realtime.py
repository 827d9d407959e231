"""Relay dispatcher events to the console UI websockets."""

from __future__ import annotations

import asyncio
import copy
import logging
from dataclasses import asdict
from typing import Any, Set

from anyio import from_thread

from notification_hub.domain.entities import ConnectionState, EventKind

from .dispatcher import EventDispatcher, Unsubscribe
from .manager import UiConnectionManager
from .payloads import InvalidNotificationPayload, parse_notification, serialize_notification

logger = logging.getLogger(__name__)

RELAYED_KINDS = (
    EventKind.NOTIFICATION_NEW,
    EventKind.NOTIFICATION_UPDATE,
    EventKind.NOTIFICATION_DELETE,
    EventKind.SYSTEM_MAINTENANCE,
    EventKind.SYSTEM_UPDATE,
    EventKind.CONNECTION_STATUS,
)


class UiEventRelay:
    """Serialize dispatcher events and schedule their delivery to UI sockets."""

    def __init__(self, dispatcher: EventDispatcher, manager: UiConnectionManager) -> None:
        self._manager = manager
        self._pending: Set[asyncio.Task[Any]] = set()
        self._unsubscribers: list[Unsubscribe] = [
            dispatcher.subscribe(kind, self._relay_for(kind)) for kind in RELAYED_KINDS
        ]

    def dispose(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def _relay_for(self, kind: EventKind):
        def relay(payload: Any) -> None:
            self._schedule_send({"type": kind.value, "data": serialize_event(kind, payload)})

        return relay

    def _schedule_send(self, message: dict[str, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            from_thread.run(self._manager.broadcast, message)
        else:
            task = loop.create_task(self._manager.broadcast(message))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)


def serialize_event(kind: EventKind, payload: Any) -> Any:
    """Return a JSON-serializable representation of ``payload``."""

    if isinstance(payload, ConnectionState):
        data = asdict(payload)
        data["status"] = payload.status.value
        return data
    if kind in (EventKind.NOTIFICATION_NEW, EventKind.NOTIFICATION_UPDATE):
        try:
            return serialize_notification(parse_notification(payload))
        except InvalidNotificationPayload:
            logger.debug("Relaying unparsed %s payload", kind.value)
    return copy.deepcopy(payload)


__all__ = ["RELAYED_KINDS", "UiEventRelay", "serialize_event"]
