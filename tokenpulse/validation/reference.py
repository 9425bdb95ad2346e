# tokenpulse/validation/reference.py
"""
Validator backed by a reference document.

The document is whatever text the caller has for a site's design system
(markdown docs, a CSS file, a style guide page). Hex colors and
font-family declarations found in it are treated as the official palette
and type stack.
"""

from __future__ import annotations

import re
from typing import List, Sequence, Set

from tokenpulse.diff.engine import format_value
from tokenpulse.logging import VALIDATION, get_logger
from tokenpulse.models.tokens import TokenEntry, TokenSet
from tokenpulse.validation.base import (
    DEFAULT_CONFIDENCE,
    MatchStatus,
    TokenMatch,
    ValidationResult,
)

logger = get_logger(__name__)

COLOR_CATEGORIES = ("colors", "color")
FONT_CATEGORIES = ("typography.families", "fonts")

_DOC_COLOR = re.compile(r"#[0-9a-fA-F]{6}\b")
_DOC_FONT = re.compile(r"font-family:\s*[\"']?([^\"';,]+)[\"']?", re.IGNORECASE)

# Confidence gained when every extracted color matches the docs
MAX_BOOST = 10.0


class ReferenceDocsValidator:
    """
    Match extracted colors and fonts against a reference document.

    Usage:
        validator = ReferenceDocsValidator(docs_text, source="Acme DS")
        result = validator.validate(snapshot)
    """

    def __init__(self, documentation: str, source: str | None = None) -> None:
        self._source = source or "reference"
        self._colors: Set[str] = {c.upper() for c in _DOC_COLOR.findall(documentation)}
        self._fonts: Set[str] = set()
        for match in _DOC_FONT.finditer(documentation):
            font = match.group(1).strip()
            if font and "var(" not in font:
                self._fonts.add(font)

    def validate(self, tokens: TokenSet) -> ValidationResult:
        result = ValidationResult(is_validated=True, source=self._source)

        colors = _entries(tokens, COLOR_CATEGORIES)
        fonts = _entries(tokens, FONT_CATEGORIES)

        result.color_matches = self._match_colors(colors)
        result.font_matches = self._match_fonts(fonts)

        if result.color_matches:
            exact = sum(1 for m in result.color_matches if m.status is MatchStatus.EXACT)
            boost = exact / len(result.color_matches) * MAX_BOOST
            result.confidence_after = min(100.0, DEFAULT_CONFIDENCE + boost)

        result.suggestions = _suggestions(result)

        logger.debug(
            f"{VALIDATION} {self._source}: {len(result.color_matches)} colors, "
            f"{len(result.font_matches)} fonts checked"
        )
        return result

    def _match_colors(self, entries: Sequence[TokenEntry]) -> List[TokenMatch]:
        matches: List[TokenMatch] = []
        for entry in entries:
            value = format_value(entry.value).strip().upper()
            if value in self._colors:
                matches.append(TokenMatch(extracted=value, status=MatchStatus.EXACT, official=value))
            else:
                matches.append(TokenMatch(extracted=value, status=MatchStatus.EXTRA))
        return matches

    def _match_fonts(self, entries: Sequence[TokenEntry]) -> List[TokenMatch]:
        matches: List[TokenMatch] = []
        for entry in entries:
            primary = format_value(entry.value).split(",")[0].strip().strip("'\"")
            if primary in self._fonts:
                matches.append(
                    TokenMatch(extracted=primary, status=MatchStatus.EXACT, official=primary)
                )
            else:
                matches.append(TokenMatch(extracted=primary, status=MatchStatus.EXTRA))
        return matches


def _entries(tokens: TokenSet, categories: Sequence[str]) -> List[TokenEntry]:
    out: List[TokenEntry] = []
    for category in categories:
        out.extend(tokens.get(category))
    return out


def _suggestions(result: ValidationResult) -> List[str]:
    suggestions: List[str] = []

    total_colors = len(result.color_matches)
    exact_colors = sum(1 for m in result.color_matches if m.status is MatchStatus.EXACT)
    if total_colors and exact_colors == total_colors:
        suggestions.append("All extracted colors match the official design system")
    elif exact_colors:
        suggestions.append(f"{exact_colors}/{total_colors} colors match the official palette")
        extra = sum(1 for m in result.color_matches if m.status is MatchStatus.EXTRA)
        if extra:
            suggestions.append(f"{extra} colors not in official docs (site-specific variants)")

    total_fonts = len(result.font_matches)
    exact_fonts = sum(1 for m in result.font_matches if m.status is MatchStatus.EXACT)
    if total_fonts and exact_fonts == total_fonts:
        suggestions.append("All fonts match the official design system")
    elif exact_fonts:
        suggestions.append(f"{exact_fonts}/{total_fonts} fonts match official documentation")

    return suggestions


__all__ = ["ReferenceDocsValidator"]
