# tokenpulse/diff/models.py
"""
Result types for token diffs.

A TokenDiff is derived on demand and never persisted as authoritative
state; it can always be recomputed from the two snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ChangeType(str, Enum):
    """Kind of change a token went through between two snapshots."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


@dataclass(frozen=True)
class TokenChange:
    """
    One changed token.

    added    -> only display_new
    removed  -> only display_old
    modified -> both
    """

    path: str
    category: str
    change_type: ChangeType
    display_old: Optional[str] = None
    display_new: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "path": self.path,
            "category": self.category,
            "changeType": self.change_type.value,
        }
        if self.display_old is not None:
            out["displayOld"] = self.display_old
        if self.display_new is not None:
            out["displayNew"] = self.display_new
        return out


@dataclass(frozen=True)
class CategoryChanges:
    """Change counts for a single category."""

    added: int = 0
    removed: int = 0
    modified: int = 0

    @property
    def total(self) -> int:
        return self.added + self.removed + self.modified

    def to_dict(self) -> Dict[str, int]:
        return {
            "added": self.added,
            "removed": self.removed,
            "modified": self.modified,
            "total": self.total,
        }


@dataclass(frozen=True)
class DiffSummary:
    """Per-category and global change counts."""

    categories: Dict[str, CategoryChanges] = field(default_factory=dict)
    added_count: int = 0
    removed_count: int = 0
    modified_count: int = 0

    @property
    def total_changes(self) -> int:
        return self.added_count + self.removed_count + self.modified_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalChanges": self.total_changes,
            "addedCount": self.added_count,
            "removedCount": self.removed_count,
            "modifiedCount": self.modified_count,
            "categories": {
                name: self.categories[name].to_dict() for name in sorted(self.categories)
            },
        }


@dataclass(frozen=True)
class TokenDiff:
    """
    Structured comparison of an old snapshot against a new one.

    Each change tuple is sorted by path so that two computations over the
    same inputs serialize identically.
    """

    added: Tuple[TokenChange, ...] = ()
    removed: Tuple[TokenChange, ...] = ()
    modified: Tuple[TokenChange, ...] = ()
    summary: DiffSummary = field(default_factory=DiffSummary)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.modified)

    def changes_for(self, category: str) -> Dict[str, Tuple[TokenChange, ...]]:
        """All changes of one category, grouped by change type."""
        return {
            ChangeType.ADDED.value: tuple(c for c in self.added if c.category == category),
            ChangeType.REMOVED.value: tuple(c for c in self.removed if c.category == category),
            ChangeType.MODIFIED.value: tuple(c for c in self.modified if c.category == category),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "added": [c.to_dict() for c in self.added],
            "removed": [c.to_dict() for c in self.removed],
            "modified": [c.to_dict() for c in self.modified],
            "summary": self.summary.to_dict(),
        }

    def __str__(self) -> str:
        return (
            f"added={self.summary.added_count}, "
            f"removed={self.summary.removed_count}, "
            f"modified={self.summary.modified_count}"
        )


__all__ = [
    "ChangeType",
    "TokenChange",
    "CategoryChanges",
    "DiffSummary",
    "TokenDiff",
]
