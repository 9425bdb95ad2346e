# tokenpulse/models/tokens.py
"""
Design token snapshot model.

A TokenSet is one completed scan's output: category name -> ordered entries.
It is immutable once built. Entries are identified inside their category by
`path`, never by position or value.

Snapshots arrive from external producers in a few shapes, all accepted by
TokenSet.from_dict():

    # list of entries per category (curated scanner output)
    {"colors": [{"path": "primary", "value": "#0000FF", "usage": 12}]}

    # path -> value mapping
    {"spacing": {"sm": "4px", "md": "8px"}}

    # W3C-style nested groups
    {"color": {"primary": {"500": {"$value": "#3B82F6"}}}}

    # nested categories
    {"typography": {"families": [...], "sizes": [...]}}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from tokenpulse.logging import DIFF, get_logger

logger = get_logger(__name__)

KNOWN_CATEGORIES: Tuple[str, ...] = (
    "colors",
    "typography.families",
    "typography.sizes",
    "typography.weights",
    "spacing",
    "radius",
    "shadows",
    "motion",
)

_VALUE_KEYS = ("value", "$value")
_PATH_KEYS = ("path", "name")


@dataclass(frozen=True)
class TokenEntry:
    """
    One named, valued unit within a category.

    `value` may be a string, a number, or a short sequence of strings
    (font stacks, layered shadows). Sequences are stored as tuples.
    """

    path: str
    value: Any
    usage: Optional[int] = None
    confidence: Optional[float] = None
    percentage: Optional[float] = None

    def __post_init__(self) -> None:
        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(self.value))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], path: str | None = None) -> "TokenEntry | None":
        """
        Build an entry from a producer dict.

        Returns None when no path can be determined.
        """
        if path is None:
            for key in _PATH_KEYS:
                candidate = raw.get(key)
                if candidate is not None and str(candidate).strip():
                    path = str(candidate)
                    break
        if path is None:
            return None

        value = None
        for key in _VALUE_KEYS:
            if key in raw:
                value = raw[key]
                break

        return cls(
            path=path,
            value=value,
            usage=_optional_int(raw.get("usage")),
            confidence=_optional_float(raw.get("confidence")),
            percentage=_optional_float(raw.get("percentage")),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"path": self.path, "value": _jsonable(self.value)}
        if self.usage is not None:
            out["usage"] = self.usage
        if self.confidence is not None:
            out["confidence"] = self.confidence
        if self.percentage is not None:
            out["percentage"] = self.percentage
        return out


@dataclass(frozen=True)
class TokenSet:
    """
    An immutable, categorized collection of design-token entries.

    Duplicate paths inside a category are kept in the order given; consumers
    that need uniqueness (the diff engine) take the first occurrence.
    """

    categories: Mapping[str, Tuple[TokenEntry, ...]] = field(default_factory=dict)
    version: Optional[str] = None

    def __post_init__(self) -> None:
        frozen = {name: tuple(entries) for name, entries in self.categories.items()}
        object.__setattr__(self, "categories", MappingProxyType(frozen))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], version: str | None = None) -> "TokenSet":
        """
        Build a TokenSet from any of the accepted producer shapes.

        Keys starting with "$" are metadata and skipped; "$version", when
        present, is used as the snapshot version unless one is passed in.
        """
        if isinstance(data, TokenSet):
            return data
        if not isinstance(data, Mapping):
            raise TypeError(f"TokenSet.from_dict expects a mapping, got {type(data).__name__}")

        if version is None and data.get("$version") is not None:
            version = str(data["$version"])

        categories: Dict[str, List[TokenEntry]] = {}
        for key, raw in data.items():
            if str(key).startswith("$"):
                continue
            _collect_category(str(key), raw, categories)

        return cls(categories={k: tuple(v) for k, v in categories.items()}, version=version)

    @property
    def category_names(self) -> List[str]:
        return list(self.categories.keys())

    def get(self, category: str) -> Tuple[TokenEntry, ...]:
        """Entries for a category; empty for categories not in the snapshot."""
        return self.categories.get(category, ())

    def count(self) -> int:
        return sum(len(entries) for entries in self.categories.values())

    def __iter__(self) -> Iterator[str]:
        return iter(self.categories)

    def __len__(self) -> int:
        return len(self.categories)

    def __contains__(self, category: object) -> bool:
        return category in self.categories

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.version is not None:
            out["$version"] = self.version
        for name, entries in self.categories.items():
            out[name] = [entry.to_dict() for entry in entries]
        return out


# ---------------------------------------------------------------------------
# parsing helpers
# ---------------------------------------------------------------------------


def _collect_category(name: str, raw: Any, out: Dict[str, List[TokenEntry]]) -> None:
    entries = out.setdefault(name, [])

    if raw is None:
        return

    if isinstance(raw, (list, tuple)):
        for index, item in enumerate(raw):
            if not isinstance(item, Mapping):
                logger.debug(f"{DIFF} {name}[{index}] is not an object; skipped")
                continue
            entry = TokenEntry.from_mapping(item)
            if entry is None:
                logger.debug(f"{DIFF} {name}[{index}] has no path; skipped")
                continue
            entries.append(entry)
        return

    if isinstance(raw, Mapping):
        for key, child in raw.items():
            key = str(key)
            if key.startswith("$"):
                continue
            if isinstance(child, (list, tuple)) and _looks_like_entries(child):
                _collect_category(f"{name}.{key}", child, out)
            else:
                _collect_group(key, child, entries)
        if not entries and any(k.startswith(f"{name}.") for k in out):
            # Pure container for nested categories, not a category itself
            del out[name]
        return

    logger.debug(f"{DIFF} category {name!r} has unsupported shape {type(raw).__name__}; ignored")


def _collect_group(path: str, raw: Any, entries: List[TokenEntry]) -> None:
    if isinstance(raw, Mapping):
        if any(key in raw for key in _VALUE_KEYS):
            entry = TokenEntry.from_mapping(raw, path=path)
            if entry is not None:
                entries.append(entry)
            return
        for key, child in raw.items():
            key = str(key)
            if key.startswith("$"):
                continue
            _collect_group(f"{path}.{key}", child, entries)
        return

    entries.append(TokenEntry(path=path, value=raw))


def _looks_like_entries(items: Any) -> bool:
    return bool(items) and all(isinstance(item, Mapping) for item in items)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _jsonable(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_jsonable(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return value


__all__ = [
    "KNOWN_CATEGORIES",
    "TokenEntry",
    "TokenSet",
]
