# tokenpulse/models/__init__.py
"""Data model shared by the loader and the diff engine."""

from .progress import (
    PHASE_LABELS,
    PHASE_ORDER,
    LoaderStatus,
    ProgressInfo,
    ProgressiveState,
    ProgressMeta,
    ProgressPhase,
)
from .tokens import KNOWN_CATEGORIES, TokenEntry, TokenSet

__all__ = [
    # Tokens
    "KNOWN_CATEGORIES",
    "TokenEntry",
    "TokenSet",
    # Progress
    "LoaderStatus",
    "ProgressPhase",
    "PHASE_ORDER",
    "PHASE_LABELS",
    "ProgressMeta",
    "ProgressInfo",
    "ProgressiveState",
]
