# tokenpulse/models/progress.py
"""
Progress and loader state types.

ProgressiveState is the only mutable piece of the loader, and even that is
replaced wholesale on every transition: consumers always receive a frozen
snapshot. Its `data` is frozen all the way down: mappings become read-only
views and lists become tuples, so neither a subscriber nor a producer that
reuses its payload can reach the loader's accumulated result.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


class LoaderStatus(str, Enum):
    """Lifecycle status of a ProgressiveLoader."""

    IDLE = "idle"
    """Constructed, not started."""

    LOADING = "loading"
    """Started, no data exposed yet. Skeleton is mandatory."""

    STREAMING = "streaming"
    """Partial data exists and may be shown."""

    COMPLETE = "complete"
    """Terminal success. Data is final."""

    ERROR = "error"
    """Terminal failure. Data keeps whatever partial result existed."""

    @property
    def is_terminal(self) -> bool:
        return self in (LoaderStatus.COMPLETE, LoaderStatus.ERROR)


class ProgressPhase(str, Enum):
    """
    Known phases of the external scanning pipeline, in order.

    The loader forwards any phase string verbatim; this vocabulary is only
    used for display labels and completion estimates.
    """

    INITIALIZING = "initializing"
    CSS_COLLECTION = "css-collection"
    TOKEN_GENERATION = "token-generation"
    ANALYSIS = "analysis"
    AI_PROCESSING = "ai-processing"
    COMPLETE = "complete"


PHASE_ORDER: Tuple[str, ...] = tuple(p.value for p in ProgressPhase)

PHASE_LABELS: Dict[str, str] = {
    ProgressPhase.INITIALIZING.value: "Initializing scan...",
    ProgressPhase.CSS_COLLECTION.value: "Collecting CSS sources...",
    ProgressPhase.TOKEN_GENERATION.value: "Generating design tokens...",
    ProgressPhase.ANALYSIS.value: "Analyzing design patterns...",
    ProgressPhase.AI_PROCESSING.value: "Processing AI insights...",
    ProgressPhase.COMPLETE.value: "Finalizing results...",
}


def _phase_value(phase: Any) -> str:
    return phase.value if isinstance(phase, Enum) else str(phase)


@dataclass(frozen=True)
class ProgressMeta:
    """Progress metadata attached by the producer to every update."""

    phase: str
    step: int = 0
    total_steps: int = len(PHASE_ORDER)

    def __post_init__(self) -> None:
        object.__setattr__(self, "phase", _phase_value(self.phase))

    @classmethod
    def coerce(cls, meta: "ProgressMeta | Mapping[str, Any] | None") -> Optional["ProgressMeta"]:
        """Accept a ProgressMeta, a plain mapping (camelCase or snake_case), or None."""
        if meta is None or isinstance(meta, ProgressMeta):
            return meta
        total = meta.get("total_steps", meta.get("totalSteps", len(PHASE_ORDER)))
        return cls(
            phase=meta.get("phase", ProgressPhase.INITIALIZING.value),
            step=int(meta.get("step", 0)),
            total_steps=int(total),
        )


@dataclass(frozen=True)
class ProgressInfo:
    """Progress as exposed to consumers."""

    phase: str = ProgressPhase.INITIALIZING.value
    step: int = 0
    total_steps: int = len(PHASE_ORDER)
    estimated_completion: float = 0.0
    completed_phases: Tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return PHASE_LABELS.get(self.phase, self.phase)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase,
            "step": self.step,
            "totalSteps": self.total_steps,
            "estimatedCompletion": self.estimated_completion,
            "completedPhases": list(self.completed_phases),
        }


@dataclass(frozen=True)
class ProgressiveState:
    """
    Read-only snapshot of a loader.

    `timestamp` and `started_at` are milliseconds from the loader's clock.
    """

    status: LoaderStatus = LoaderStatus.IDLE
    progress: ProgressInfo = field(default_factory=ProgressInfo)
    data: Optional[Mapping[str, Any]] = None
    error: Optional[BaseException] = None
    timestamp: float = 0.0
    started_at: Optional[float] = None
    destroyed: bool = False

    def __post_init__(self) -> None:
        if self.data is not None:
            object.__setattr__(self, "data", freeze(self.data))

    def evolve(self, **changes: Any) -> "ProgressiveState":
        return replace(self, **changes)

    @property
    def is_terminal(self) -> bool:
        return self.destroyed or self.status.is_terminal

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view for transports (SSE, HTTP)."""
        return {
            "status": self.status.value,
            "progress": self.progress.to_dict(),
            "data": _plain(self.data),
            "error": _error_dict(self.error),
            "timestamp": self.timestamp,
            "startedAt": self.started_at,
        }


def freeze(value: Any) -> Any:
    """Copy nested mappings into read-only views and lists into tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


def _error_dict(error: Optional[BaseException]) -> Optional[Dict[str, str]]:
    if error is None:
        return None
    return {"type": type(error).__name__, "message": str(error)}


__all__ = [
    "LoaderStatus",
    "ProgressPhase",
    "PHASE_ORDER",
    "PHASE_LABELS",
    "ProgressMeta",
    "ProgressInfo",
    "ProgressiveState",
    "freeze",
]
