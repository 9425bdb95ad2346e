# tokenpulse/loader/__init__.py
"""
Progressive loading of scan results.

Key components:
- transitions: pure state machine (no clock, no timers)
- ProgressiveLoader: owns state, clock and subscribers
- SkeletonScheduler: asyncio timers that republish when the skeleton
  floor or ceiling passes without new events
"""

from .estimate import PHASE_WEIGHTS, estimate_completion
from .loader import ProgressiveLoader, Subscriber, Unsubscribe
from .scheduler import SkeletonScheduler
from .transitions import (
    EventKind,
    LoaderEvent,
    TransitionContext,
    TransitionResult,
    merge_partial,
    should_show_skeleton,
    transition,
)

__all__ = [
    # State machine
    "EventKind",
    "LoaderEvent",
    "TransitionContext",
    "TransitionResult",
    "transition",
    "merge_partial",
    "should_show_skeleton",
    # Estimates
    "PHASE_WEIGHTS",
    "estimate_completion",
    # Loader
    "ProgressiveLoader",
    "Subscriber",
    "Unsubscribe",
    "SkeletonScheduler",
]
