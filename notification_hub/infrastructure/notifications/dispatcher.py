"""In-process publish/subscribe registry for realtime events."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from notification_hub.domain.entities import EventKind

logger = logging.getLogger(__name__)

Subscriber = Callable[[Any], None]
Unsubscribe = Callable[[], None]


class EventDispatcher:
    """Fan events out to the callbacks registered for their kind.

    Delivery is synchronous and follows registration order. The dispatcher
    assumes a single event loop and takes no locks. A subscriber that
    dispatches the same kind again runs on the current call stack; guarding
    against unbounded recursion is up to that subscriber.
    """

    def __init__(self) -> None:
        # dict keys double as an insertion-ordered set of callbacks
        self._subscribers: Dict[EventKind | str, Dict[Subscriber, None]] = {}

    def subscribe(self, kind: EventKind | str, callback: Subscriber) -> Unsubscribe:
        """Register ``callback`` for ``kind`` and return its unsubscribe function."""

        key = _normalize_kind(kind)
        self._subscribers.setdefault(key, {})[callback] = None
        active = True

        def unsubscribe() -> None:
            nonlocal active
            if not active:
                return
            active = False
            callbacks = self._subscribers.get(key)
            if callbacks is None:
                return
            callbacks.pop(callback, None)
            if not callbacks:
                self._subscribers.pop(key, None)

        return unsubscribe

    def dispatch(self, kind: EventKind | str, payload: Any = None) -> None:
        """Invoke every current subscriber of ``kind`` with ``payload``."""

        key = _normalize_kind(kind)
        callbacks = self._subscribers.get(key)
        if not callbacks:
            return

        for callback in list(callbacks):
            try:
                callback(payload)
            except Exception:
                logger.exception("Error in %s subscriber %r", _kind_name(key), callback)

    def subscriber_count(self, kind: EventKind | str) -> int:
        """Return how many callbacks are registered for ``kind``."""

        return len(self._subscribers.get(_normalize_kind(kind), ()))

    def has_subscribers(self) -> bool:
        return bool(self._subscribers)

    def clear(self) -> None:
        """Drop every subscription."""

        self._subscribers.clear()


def _normalize_kind(kind: EventKind | str) -> EventKind | str:
    if isinstance(kind, EventKind):
        return kind
    try:
        return EventKind(kind)
    except ValueError:
        return kind


def _kind_name(kind: EventKind | str) -> str:
    return kind.value if isinstance(kind, EventKind) else str(kind)


__all__ = ["EventDispatcher", "Subscriber", "Unsubscribe"]
