"""Timer scheduling used for reconnection backoff and auto-dismiss."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Run ``callback(*args)`` once after ``delay`` seconds."""

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> TimerHandle: ...


class AsyncioScheduler:
    """Schedule timers on the running asyncio event loop."""

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, callback, *args)


def backoff_delay(attempt: int, base: float) -> float:
    """Return the exponential delay for the ``attempt``-th retry (1-based)."""

    if attempt < 1:
        raise ValueError("attempt must be 1 or greater")
    return base * 2 ** (attempt - 1)


__all__ = ["AsyncioScheduler", "Scheduler", "TimerHandle", "backoff_delay"]
