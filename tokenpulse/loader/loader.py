# tokenpulse/loader/loader.py
"""
Progressive loader.

Consumes producer events for one scan session, keeps the single mutable
ProgressiveState, and republishes immutable snapshots to subscribers. The
decision logic lives in transitions.py; this class only owns the state,
the clock and the subscriber list.

Usage:
    loader = ProgressiveLoader(LoaderConfig.for_scans())
    unsubscribe = loader.subscribe(render)

    loader.start()
    loader.update({"colors": [...]}, ProgressMeta("css-collection", 2, 6))
    loader.complete(final_result)

    if loader.should_show_skeleton():
        ...
"""

from __future__ import annotations

import itertools
from collections import deque
from typing import Any, Callable, Deque, Dict, Mapping, Optional

from tokenpulse.config.schema import LoaderConfig
from tokenpulse.core.clock import Clock, SystemClock
from tokenpulse.loader.transitions import (
    EventKind,
    LoaderEvent,
    TransitionContext,
    elapsed_ms,
    should_show_skeleton,
    transition,
)
from tokenpulse.logging import LOADER, get_logger
from tokenpulse.models.progress import ProgressiveState, ProgressMeta

logger = get_logger(__name__)

Subscriber = Callable[[ProgressiveState], None]
Unsubscribe = Callable[[], None]


def _noop() -> None:
    return None


class ProgressiveLoader:
    """
    Skeleton-vs-data state machine for one scan session.

    Not thread-safe: a loader belongs to exactly one session running on one
    event loop. Every public method is a silent no-op after destroy().
    """

    def __init__(
        self,
        config: LoaderConfig | Mapping[str, Any] | None = None,
        *,
        clock: Optional[Clock] = None,
        name: str = "scan",
    ) -> None:
        """
        Args:
            config: Loader timing (LoaderConfig or option mapping)
            clock: Time source in milliseconds; defaults to SystemClock
            name: Label used in log lines
        """
        if config is None:
            config = LoaderConfig()
        elif not isinstance(config, LoaderConfig):
            config = LoaderConfig.model_validate(dict(config))

        self._config: LoaderConfig = config
        self._clock: Clock = clock or SystemClock()
        self._name = name

        self._state = ProgressiveState(timestamp=self._clock.now())
        self._subscribers: Dict[int, Subscriber] = {}
        self._ids = itertools.count()

        self._pending: Deque[LoaderEvent] = deque()
        self._dispatching = False
        self._last_skeleton = True

    # ------------------------------------------------------------------
    # properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> LoaderConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._name

    @property
    def destroyed(self) -> bool:
        return self._state.destroyed

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    # ------------------------------------------------------------------
    # producer side
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin the session; the skeleton is shown from now on."""
        self._dispatch(LoaderEvent.start())

    def update(
        self,
        payload: Optional[Mapping[str, Any]] = None,
        meta: "ProgressMeta | Mapping[str, Any] | None" = None,
    ) -> None:
        """Merge a partial payload and forward progress metadata."""
        self._dispatch(LoaderEvent.update(payload, meta))

    def complete(self, final: Optional[Mapping[str, Any]] = None) -> None:
        """Terminal success. Later calls are ignored."""
        self._dispatch(LoaderEvent.complete(final))

    def fail(self, error: Any) -> None:
        """Terminal failure. Idempotent; only the first terminal transition wins."""
        self._dispatch(LoaderEvent.fail(error))

    def destroy(self) -> None:
        """Silence all notifications and make every later call a no-op."""
        if self._state.destroyed:
            return
        # Applied immediately, even from inside a subscriber callback
        ctx = TransitionContext(now=self._clock.now(), config=self._config)
        self._state = transition(self._state, LoaderEvent.destroy(), ctx).state
        self._subscribers.clear()
        self._pending.clear()
        logger.debug(f"{LOADER} {self._name}: destroyed")

    # ------------------------------------------------------------------
    # consumer side
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber, *, emit_current: bool = False) -> Unsubscribe:
        """
        Register a callback for state changes.

        Callbacks run synchronously, in subscription order. If emit_current
        is true the callback is invoked once immediately with the current
        state.

        Returns:
            A function that removes the subscription (safe to call twice).
        """
        if self._state.destroyed:
            return _noop

        token = next(self._ids)
        self._subscribers[token] = callback

        if emit_current:
            self._invoke(callback, self._state)

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    def get_state(self) -> ProgressiveState:
        """Current immutable snapshot."""
        return self._state

    def should_show_skeleton(self) -> bool:
        return should_show_skeleton(self._state, self._clock.now(), self._config)

    def elapsed(self) -> float:
        """Milliseconds since start(), 0 if not started."""
        return elapsed_ms(self._state, self._clock.now())

    def transition_style(self) -> str:
        """Advisory CSS transition for consumers animating skeleton -> content."""
        return f"transition-all duration-{int(self._config.transition_duration)} ease-out"

    def refresh(self) -> bool:
        """
        Republish the current state if skeleton visibility flipped since the
        last notification (floor or ceiling crossed with no new event).

        In buffered mode (streaming disabled) nothing is republished: the
        only notifications are start() and the terminal transition.

        Returns:
            True if subscribers were notified.
        """
        if self._state.destroyed or self._dispatching:
            return False
        if not self._config.streaming_enabled:
            return False

        visible = self.should_show_skeleton()
        if visible == self._last_skeleton:
            return False

        if not visible and self._state.started_at is not None:
            if self.elapsed() >= self._config.skeleton_timeout and not self._state.is_terminal:
                logger.info(
                    f"{LOADER} {self._name}: skeleton timeout reached after "
                    f"{self.elapsed():.0f}ms, showing best available data"
                )

        self._state = self._state.evolve(timestamp=self._clock.now())
        self._publish()
        return True

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _dispatch(self, event: LoaderEvent) -> None:
        if self._state.destroyed:
            return

        self._pending.append(event)
        if self._dispatching:
            # Re-entrant call from a subscriber: processed after this round
            return

        self._dispatching = True
        try:
            while self._pending:
                self._apply(self._pending.popleft())
        finally:
            self._dispatching = False

    def _apply(self, event: LoaderEvent) -> None:
        previous = self._state
        ctx = TransitionContext(now=self._clock.now(), config=self._config)
        result = transition(previous, event, ctx)
        self._state = result.state

        if result.state is previous:
            logger.debug(
                f"{LOADER} {self._name}: {event.kind.value} ignored in {previous.status.value}"
            )
            return

        self._log_transition(event, previous, result.state)

        if result.notify:
            self._publish()

    def _publish(self) -> None:
        state = self._state
        self._last_skeleton = should_show_skeleton(state, self._clock.now(), self._config)
        for callback in list(self._subscribers.values()):
            if self._state.destroyed:
                break
            self._invoke(callback, state)

    def _invoke(self, callback: Subscriber, state: ProgressiveState) -> None:
        try:
            callback(state)
        except Exception:
            logger.exception(f"{LOADER} {self._name}: subscriber raised; continuing")

    def _log_transition(
        self,
        event: LoaderEvent,
        previous: ProgressiveState,
        current: ProgressiveState,
    ) -> None:
        elapsed = elapsed_ms(current, current.timestamp)
        if event.kind is EventKind.START:
            logger.info(
                f"{LOADER} {self._name}: started "
                f"(timeout={self._config.skeleton_timeout:.0f}ms, "
                f"min={self._config.min_skeleton_duration:.0f}ms)"
            )
        elif event.kind is EventKind.UPDATE:
            logger.debug(
                f"{LOADER} {self._name}: update {current.progress.phase} "
                f"{current.progress.step}/{current.progress.total_steps} ({elapsed:.0f}ms)"
            )
            if previous.status is not current.status:
                logger.debug(
                    f"{LOADER} {self._name}: {previous.status.value} -> {current.status.value}"
                )
        elif event.kind is EventKind.COMPLETE:
            logger.info(f"{LOADER} {self._name}: complete ({elapsed:.0f}ms total)")
        elif event.kind is EventKind.FAIL:
            logger.warning(
                f"{LOADER} {self._name}: failed after {elapsed:.0f}ms: {current.error!r}"
            )


__all__ = [
    "ProgressiveLoader",
    "Subscriber",
    "Unsubscribe",
]
