# tokenpulse/loader/scheduler.py
"""
asyncio adapter that turns the loader's time bounds into notifications.

The loader itself never schedules anything. When a producer goes quiet,
nobody calls update(), so nobody would learn that the skeleton floor or
ceiling has passed. SkeletonScheduler arms two timers on the running loop,
at min_skeleton_duration and skeleton_timeout after start(), and calls
loader.refresh() when each fires. Timers are cancelled as soon as the
loader reaches a terminal state or cancel() is called. Buffered loaders
(streaming disabled) get no timers.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

from tokenpulse.loader.loader import ProgressiveLoader, Unsubscribe
from tokenpulse.logging import LOADER, get_logger
from tokenpulse.models.progress import LoaderStatus, ProgressiveState

logger = get_logger(__name__)


class SkeletonScheduler:
    """
    Drives ProgressiveLoader.refresh() from event-loop timers.

    Usage:
        scheduler = SkeletonScheduler(loader)
        scheduler.attach()      # before or after loader.start()
        ...
        scheduler.cancel()
    """

    def __init__(
        self,
        loader: ProgressiveLoader,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._loader = loader
        self._loop = loop
        self._handles: List[asyncio.TimerHandle] = []
        self._unsubscribe: Optional[Unsubscribe] = None

    @property
    def armed(self) -> bool:
        return bool(self._handles)

    def attach(self) -> None:
        """Arm timers now if the loader already started, else on start()."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._loader.subscribe(self._on_state)
        state = self._loader.get_state()
        if state.status is not LoaderStatus.IDLE:
            self._on_state(state)

    def cancel(self) -> None:
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_state(self, state: ProgressiveState) -> None:
        if state.is_terminal:
            self.cancel()
            return
        if not self._loader.config.streaming_enabled:
            # Buffered loaders never republish from refresh()
            return
        if state.started_at is not None and not self._handles:
            self._arm()

    def _arm(self) -> None:
        loop = self._loop or asyncio.get_running_loop()
        config = self._loader.config
        elapsed = self._loader.elapsed()

        for bound in sorted({config.min_skeleton_duration, config.skeleton_timeout}):
            delay = max(0.0, bound - elapsed) / 1000.0
            self._handles.append(loop.call_later(delay, self._fire))

        logger.debug(
            f"{LOADER} {self._loader.name}: armed {len(self._handles)} skeleton timer(s)"
        )

    def _fire(self) -> None:
        if self._loader.destroyed:
            self.cancel()
            return
        self._loader.refresh()


__all__ = ["SkeletonScheduler"]
