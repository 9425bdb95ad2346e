# tokenpulse/core/clock.py
"""
Time sources.

The loader never reads the wall clock directly; it asks an injected Clock
for the current time in milliseconds. SystemClock is monotonic so that
elapsed-time checks survive system clock adjustments. ManualClock lets
callers (and tests) drive time explicitly.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Anything that can report the current time in milliseconds."""

    def now(self) -> float:
        ...


class SystemClock:
    """Monotonic clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic() * 1000.0


class ManualClock:
    """
    Clock that only moves when told to.

    Usage:
        clock = ManualClock()
        loader = ProgressiveLoader(config, clock=clock)
        loader.start()
        clock.advance(250)
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, ms: float) -> float:
        if ms < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += ms
        return self._now

    def set(self, ms: float) -> None:
        if ms < self._now:
            raise ValueError("ManualClock cannot move backwards")
        self._now = float(ms)
