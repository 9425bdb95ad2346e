# tokenpulse/diff/changelog.py
"""
Human-facing renderings of a diff.

- generate_changelog: markdown report, one section per category
- similarity_score: 0-100 score mixing structural and value overlap
"""

from __future__ import annotations

from typing import Dict, List, Set

from tokenpulse.diff.engine import (
    SnapshotLike,
    coerce_snapshot,
    index_entries,
    normalize_value,
)
from tokenpulse.diff.models import TokenDiff
from tokenpulse.models.tokens import TokenSet

DEFAULT_TITLE = "Design Token Changes"


def generate_changelog(diff: TokenDiff, title: str = DEFAULT_TITLE) -> str:
    """
    Render a diff as markdown.

    Categories without changes are left out; an empty diff renders the
    totals block only.
    """
    summary = diff.summary
    lines: List[str] = [
        f"# {title}",
        "",
        f"**Total Changes**: {summary.total_changes}",
        f"- Added: {summary.added_count}",
        f"- Removed: {summary.removed_count}",
        f"- Modified: {summary.modified_count}",
        "",
    ]

    for category in sorted(summary.categories):
        if summary.categories[category].total == 0:
            continue

        groups = diff.changes_for(category)
        lines.append(f"## {_heading(category)}")
        lines.append("")

        added = groups["added"]
        if added:
            lines.append(f"### Added ({len(added)})")
            lines.extend(f"- `{c.path}`: {c.display_new}" for c in added)
            lines.append("")

        removed = groups["removed"]
        if removed:
            lines.append(f"### Removed ({len(removed)})")
            lines.extend(f"- `{c.path}`: ~~{c.display_old}~~" for c in removed)
            lines.append("")

        modified = groups["modified"]
        if modified:
            lines.append(f"### Modified ({len(modified)})")
            lines.extend(f"- `{c.path}`: {c.display_old} → {c.display_new}" for c in modified)
            lines.append("")

    return "\n".join(lines)


def similarity_score(old: SnapshotLike, new: SnapshotLike) -> int:
    """
    Score how alike two snapshots are, from 0 (disjoint) to 100 (identical).

    Half the score is shared (category, path) identities over all unique
    identities; the other half is identities whose values also match.
    """
    old_set = coerce_snapshot(old, "old")
    new_set = coerce_snapshot(new, "new")

    old_values = _flatten(old_set)
    new_values = _flatten(new_set)

    unique: Set[str] = set(old_values) | set(new_values)
    if not unique:
        return 100

    common = [key for key in old_values if key in new_values]
    matching = sum(1 for key in common if old_values[key] == new_values[key])

    structure = len(common) / len(unique) * 50
    values = matching / len(unique) * 50
    return round(structure + values)


def _flatten(snapshot: TokenSet) -> Dict[str, str]:
    flat: Dict[str, str] = {}
    for category in snapshot.categories:
        for path, entry in index_entries(category, snapshot.get(category)).items():
            flat[f"{category}\x00{path}"] = normalize_value(entry.value)
    return flat


def _heading(category: str) -> str:
    return category[:1].upper() + category[1:]


__all__ = [
    "DEFAULT_TITLE",
    "generate_changelog",
    "similarity_score",
]
