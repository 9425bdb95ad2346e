# tokenpulse/diff/__init__.py
"""
Token version diffing.

Usage:
    from tokenpulse.diff import compute_diff, generate_changelog

    diff = compute_diff(previous_snapshot, current_snapshot)
    print(diff)  # "added=1, removed=1, modified=1"
    print(generate_changelog(diff))
"""

from .changelog import DEFAULT_TITLE, generate_changelog, similarity_score
from .engine import (
    EMPTY_DISPLAY,
    TokenDiffer,
    coerce_snapshot,
    compute_diff,
    format_value,
    index_entries,
    normalize_value,
)
from .models import CategoryChanges, ChangeType, DiffSummary, TokenChange, TokenDiff

__all__ = [
    # Models
    "ChangeType",
    "TokenChange",
    "CategoryChanges",
    "DiffSummary",
    "TokenDiff",
    # Engine
    "EMPTY_DISPLAY",
    "TokenDiffer",
    "coerce_snapshot",
    "compute_diff",
    "format_value",
    "index_entries",
    "normalize_value",
    # Reports
    "DEFAULT_TITLE",
    "generate_changelog",
    "similarity_score",
]
