# tokenpulse/loader/transitions.py
"""
Pure state machine for the progressive loader.

    idle --start--> loading --update--> streaming --complete--> complete
                       |                    |
                       +------fail----------+-----------------> error

transition() takes the current state, an event and a context (current time
plus config) and returns the next state together with a flag telling the
caller whether subscribers must be notified. It never touches a clock,
never schedules anything, and never raises for lifecycle misuse: late and
duplicate events simply come back as "unchanged".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from tokenpulse.config.schema import LoaderConfig
from tokenpulse.exceptions import ProducerError
from tokenpulse.loader.estimate import estimate_completion, phase_step
from tokenpulse.models.progress import (
    LoaderStatus,
    ProgressInfo,
    ProgressiveState,
    ProgressMeta,
    ProgressPhase,
)


class EventKind(str, Enum):
    START = "start"
    UPDATE = "update"
    COMPLETE = "complete"
    FAIL = "fail"
    DESTROY = "destroy"


@dataclass(frozen=True)
class LoaderEvent:
    """Input to the state machine."""

    kind: EventKind
    payload: Optional[Mapping[str, Any]] = None
    meta: Optional[ProgressMeta] = None
    error: Optional[BaseException] = None

    @classmethod
    def start(cls) -> "LoaderEvent":
        return cls(EventKind.START)

    @classmethod
    def update(
        cls,
        payload: Optional[Mapping[str, Any]] = None,
        meta: "ProgressMeta | Mapping[str, Any] | None" = None,
    ) -> "LoaderEvent":
        return cls(EventKind.UPDATE, payload=payload, meta=ProgressMeta.coerce(meta))

    @classmethod
    def complete(cls, payload: Optional[Mapping[str, Any]] = None) -> "LoaderEvent":
        return cls(EventKind.COMPLETE, payload=payload)

    @classmethod
    def fail(cls, error: Any) -> "LoaderEvent":
        return cls(EventKind.FAIL, error=as_exception(error))

    @classmethod
    def destroy(cls) -> "LoaderEvent":
        return cls(EventKind.DESTROY)


@dataclass(frozen=True)
class TransitionContext:
    now: float
    config: LoaderConfig


@dataclass(frozen=True)
class TransitionResult:
    state: ProgressiveState
    notify: bool = False


def as_exception(error: Any) -> BaseException:
    """Producer failures are stored as exceptions; wrap anything else."""
    if isinstance(error, BaseException):
        return error
    return ProducerError(str(error) if error is not None else "Unknown producer error")


def merge_partial(
    current: Optional[Mapping[str, Any]],
    incoming: Optional[Mapping[str, Any]],
) -> Optional[Dict[str, Any]]:
    """
    Shallow-merge an incoming partial payload over the current result.

    Incoming keys overwrite. When both sides carry a `summary` mapping its
    fields are replaced one by one (never summed), and summary fields the
    incoming payload does not mention are kept.
    """
    if incoming is None:
        return dict(current) if current is not None else None

    merged: Dict[str, Any] = dict(current or {})
    for key, value in incoming.items():
        previous = merged.get(key)
        if key == "summary" and isinstance(previous, Mapping) and isinstance(value, Mapping):
            merged[key] = {**previous, **value}
        else:
            merged[key] = value
    return merged


def elapsed_ms(state: ProgressiveState, now: float) -> float:
    """Milliseconds since start(); 0 before the loader was started."""
    if state.started_at is None:
        return 0.0
    return max(0.0, now - state.started_at)


def should_show_skeleton(state: ProgressiveState, now: float, config: LoaderConfig) -> bool:
    """
    Skeleton visibility policy.

    - never after a terminal transition or destroy
    - never once skeleton_timeout has elapsed, data or not
    - always while idle or loading
    - while streaming, only until min_skeleton_duration has elapsed
    """
    if state.destroyed or state.status.is_terminal:
        return False

    elapsed = elapsed_ms(state, now)
    if state.started_at is not None and elapsed >= config.skeleton_timeout:
        return False

    if state.status in (LoaderStatus.IDLE, LoaderStatus.LOADING):
        return True

    return state.status is LoaderStatus.STREAMING and elapsed < config.min_skeleton_duration


def _progress_for_update(
    progress: ProgressInfo,
    meta: Optional[ProgressMeta],
    elapsed: float,
) -> ProgressInfo:
    if meta is None:
        return ProgressInfo(
            phase=progress.phase,
            step=progress.step,
            total_steps=progress.total_steps,
            estimated_completion=estimate_completion(progress.phase, elapsed),
            completed_phases=progress.completed_phases,
        )

    completed = progress.completed_phases
    if meta.phase != progress.phase and progress.phase not in completed and progress.step > 0:
        completed = completed + (progress.phase,)

    step = meta.step if meta.step > 0 else phase_step(meta.phase)
    return ProgressInfo(
        phase=meta.phase,
        step=step,
        total_steps=meta.total_steps,
        estimated_completion=estimate_completion(meta.phase, elapsed),
        completed_phases=completed,
    )


def _progress_for_complete(progress: ProgressInfo, elapsed: float) -> ProgressInfo:
    completed = progress.completed_phases
    if progress.phase not in completed and progress.phase != ProgressPhase.COMPLETE.value:
        completed = completed + (progress.phase,)
    return ProgressInfo(
        phase=ProgressPhase.COMPLETE.value,
        step=progress.total_steps,
        total_steps=progress.total_steps,
        estimated_completion=float(round(elapsed)),
        completed_phases=completed,
    )


def transition(
    state: ProgressiveState,
    event: LoaderEvent,
    ctx: TransitionContext,
) -> TransitionResult:
    """
    Compute the next loader state.

    Args:
        state: Current state
        event: Incoming event
        ctx: Current time and loader config

    Returns:
        TransitionResult; notify=False with the same state means the event
        was ignored.
    """
    unchanged = TransitionResult(state=state, notify=False)

    if state.destroyed:
        return unchanged

    if event.kind is EventKind.DESTROY:
        return TransitionResult(state=state.evolve(destroyed=True, timestamp=ctx.now))

    status = state.status

    if event.kind is EventKind.START:
        if status is not LoaderStatus.IDLE:
            return unchanged
        started = state.evolve(
            status=LoaderStatus.LOADING,
            started_at=ctx.now,
            timestamp=ctx.now,
            progress=ProgressInfo(
                phase=ProgressPhase.INITIALIZING.value,
                step=0,
                total_steps=state.progress.total_steps,
            ),
        )
        return TransitionResult(state=started, notify=True)

    if status is LoaderStatus.IDLE or status.is_terminal:
        # Not started yet, or a racing producer after the terminal transition
        return unchanged

    elapsed = elapsed_ms(state, ctx.now)

    if event.kind is EventKind.UPDATE:
        data = merge_partial(state.data, event.payload)
        progress = _progress_for_update(state.progress, event.meta, elapsed)

        if ctx.config.streaming_enabled:
            nxt = state.evolve(
                status=LoaderStatus.STREAMING,
                data=data,
                progress=progress,
                timestamp=ctx.now,
            )
            return TransitionResult(state=nxt, notify=True)

        # Buffered mode: stay in loading, accumulate silently
        nxt = state.evolve(data=data, progress=progress, timestamp=ctx.now)
        return TransitionResult(state=nxt, notify=False)

    if event.kind is EventKind.COMPLETE:
        nxt = state.evolve(
            status=LoaderStatus.COMPLETE,
            data=merge_partial(state.data, event.payload),
            progress=_progress_for_complete(state.progress, elapsed),
            timestamp=ctx.now,
        )
        return TransitionResult(state=nxt, notify=True)

    if event.kind is EventKind.FAIL:
        nxt = state.evolve(
            status=LoaderStatus.ERROR,
            error=event.error if event.error is not None else as_exception(None),
            timestamp=ctx.now,
        )
        return TransitionResult(state=nxt, notify=True)

    return unchanged


__all__ = [
    "EventKind",
    "LoaderEvent",
    "TransitionContext",
    "TransitionResult",
    "as_exception",
    "elapsed_ms",
    "merge_partial",
    "should_show_skeleton",
    "transition",
]
