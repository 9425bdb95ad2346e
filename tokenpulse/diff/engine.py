# tokenpulse/diff/engine.py
"""
Token diff engine.

Compares an old TokenSet with a new one and reports what changed:

1. For every category in either snapshot (union of category names):
   a. Build path -> entry lookups for both sides (first occurrence wins)
   b. Paths only in new  -> added
   c. Paths only in old  -> removed
   d. Paths in both with different normalized values -> modified
2. Count changes per category and globally
3. Sort every change list by path

Only `value` participates in the comparison. usage / confidence /
percentage drift with the same value is not a change.

The engine is pure: no I/O, no shared state, safe to call from any number
of callers at once.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, List, Mapping, Tuple, Union

from tokenpulse.diff.models import (
    CategoryChanges,
    ChangeType,
    DiffSummary,
    TokenChange,
    TokenDiff,
)
from tokenpulse.exceptions import SnapshotError
from tokenpulse.logging import DIFF, get_logger
from tokenpulse.models.tokens import TokenEntry, TokenSet

logger = get_logger(__name__)

SnapshotLike = Union[TokenSet, Mapping[str, Any]]

EMPTY_DISPLAY = "—"

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def format_value(value: Any) -> str:
    """
    Render a token value as a stable, human-readable string.

    Sequences are joined with ", " and integral floats lose their ".0" so
    that producers emitting 4 and 4.0 (or "4") render the same.
    """
    if value is None:
        return EMPTY_DISPLAY
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(v) for v in value)
    if isinstance(value, Mapping):
        components = value.get("components")
        if isinstance(components, (list, tuple)):
            return f"rgb({', '.join(format_value(c) for c in components)})"
        return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)
    return str(value)


def normalize_value(value: Any) -> str:
    """
    Comparison key for a token value.

    Whitespace is trimmed; case is folded only for hex colors, since case
    is significant in font names and most other values.
    """
    text = format_value(value).strip()
    if _HEX_COLOR.match(text):
        return text.upper()
    return text


def coerce_snapshot(snapshot: SnapshotLike | None, side: str = "snapshot") -> TokenSet:
    """
    Accept a TokenSet or a raw mapping.

    Raises:
        SnapshotError: If the snapshot is None or not a mapping
    """
    if snapshot is None:
        raise SnapshotError(f"{side} snapshot is required, got None")
    if isinstance(snapshot, TokenSet):
        return snapshot
    if isinstance(snapshot, Mapping):
        return TokenSet.from_dict(snapshot)
    raise SnapshotError(
        f"{side} snapshot must be a TokenSet or mapping, got {type(snapshot).__name__}"
    )


def index_entries(category: str, entries: Tuple[TokenEntry, ...]) -> Dict[str, TokenEntry]:
    """path -> entry, keeping the first occurrence of duplicate paths."""
    table: Dict[str, TokenEntry] = {}
    for entry in entries:
        if entry.path in table:
            logger.debug(f"{DIFF} duplicate path {category}/{entry.path}; keeping first")
            continue
        table[entry.path] = entry
    return table


def _sort_key(change: TokenChange) -> Tuple[str, str]:
    return change.path, change.category


class TokenDiffer:
    """
    Computes TokenDiff results between two snapshots.

    Holds no per-call state; one instance can serve any number of diffs.

    Usage:
        differ = TokenDiffer()
        diff = differ.compute_diff(old_snapshot, new_snapshot)
        print(diff)  # "added=1, removed=1, modified=1"
    """

    def compute_diff(self, old: SnapshotLike, new: SnapshotLike) -> TokenDiff:
        """
        Compare `old` against `new`.

        Args:
            old: Previous snapshot (TokenSet or raw mapping)
            new: Current snapshot (TokenSet or raw mapping)

        Returns:
            TokenDiff with sorted change lists and summary counts

        Raises:
            SnapshotError: If either snapshot is None or not a mapping
        """
        old_set = coerce_snapshot(old, "old")
        new_set = coerce_snapshot(new, "new")

        added: List[TokenChange] = []
        removed: List[TokenChange] = []
        modified: List[TokenChange] = []
        categories: Dict[str, CategoryChanges] = {}

        names = list(old_set.categories)
        names.extend(name for name in new_set.categories if name not in old_set.categories)

        for category in sorted(names):
            old_table = index_entries(category, old_set.get(category))
            new_table = index_entries(category, new_set.get(category))

            cat_added, cat_removed, cat_modified = self._diff_category(
                category, old_table, new_table
            )
            added.extend(cat_added)
            removed.extend(cat_removed)
            modified.extend(cat_modified)

            categories[category] = CategoryChanges(
                added=len(cat_added),
                removed=len(cat_removed),
                modified=len(cat_modified),
            )

        added.sort(key=_sort_key)
        removed.sort(key=_sort_key)
        modified.sort(key=_sort_key)

        diff = TokenDiff(
            added=tuple(added),
            removed=tuple(removed),
            modified=tuple(modified),
            summary=DiffSummary(
                categories=categories,
                added_count=len(added),
                removed_count=len(removed),
                modified_count=len(modified),
            ),
        )

        logger.debug(f"{DIFF} computed over {len(categories)} categories: {diff}")
        return diff

    @staticmethod
    def _diff_category(
        category: str,
        old_table: Dict[str, TokenEntry],
        new_table: Dict[str, TokenEntry],
    ) -> Tuple[List[TokenChange], List[TokenChange], List[TokenChange]]:
        added: List[TokenChange] = []
        removed: List[TokenChange] = []
        modified: List[TokenChange] = []

        for path, entry in new_table.items():
            if path not in old_table:
                added.append(
                    TokenChange(
                        path=path,
                        category=category,
                        change_type=ChangeType.ADDED,
                        display_new=format_value(entry.value),
                    )
                )

        for path, entry in old_table.items():
            if path not in new_table:
                removed.append(
                    TokenChange(
                        path=path,
                        category=category,
                        change_type=ChangeType.REMOVED,
                        display_old=format_value(entry.value),
                    )
                )
                continue

            current = new_table[path]
            if normalize_value(entry.value) != normalize_value(current.value):
                modified.append(
                    TokenChange(
                        path=path,
                        category=category,
                        change_type=ChangeType.MODIFIED,
                        display_old=format_value(entry.value),
                        display_new=format_value(current.value),
                    )
                )

        return added, removed, modified


def compute_diff(old: SnapshotLike, new: SnapshotLike) -> TokenDiff:
    """
    Convenience function to compute a diff.

    Args:
        old: Previous snapshot
        new: Current snapshot

    Returns:
        TokenDiff
    """
    return TokenDiffer().compute_diff(old, new)


__all__ = [
    "EMPTY_DISPLAY",
    "SnapshotLike",
    "TokenDiffer",
    "coerce_snapshot",
    "compute_diff",
    "format_value",
    "index_entries",
    "normalize_value",
]
