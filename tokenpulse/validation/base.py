# tokenpulse/validation/base.py
"""
Documentation validation capability.

Validating extracted tokens against a design system's published docs is
optional: some deployments have a documentation source, most do not. The
capability is therefore an injected DocumentationValidator, resolved once
at construction time by resolve_validator(). When nothing usable is
supplied, NoOpValidator stands in and reports "not validated".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from tokenpulse.logging import VALIDATION, get_logger
from tokenpulse.models.tokens import TokenSet

logger = get_logger(__name__)

DEFAULT_CONFIDENCE = 90.0


class MatchStatus(str, Enum):
    EXACT = "exact"
    CLOSE = "close"
    MISSING = "missing"
    EXTRA = "extra"


@dataclass(frozen=True)
class TokenMatch:
    """One extracted value checked against the reference docs."""

    extracted: str
    status: MatchStatus
    official: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"extracted": self.extracted, "status": self.status.value}
        if self.official is not None:
            out["official"] = self.official
        return out


@dataclass
class ValidationResult:
    """Outcome of validating a snapshot against documentation."""

    is_validated: bool = False
    source: Optional[str] = None
    color_matches: List[TokenMatch] = field(default_factory=list)
    font_matches: List[TokenMatch] = field(default_factory=list)
    confidence_before: float = DEFAULT_CONFIDENCE
    confidence_after: float = DEFAULT_CONFIDENCE
    suggestions: List[str] = field(default_factory=list)

    @property
    def improvement(self) -> float:
        return self.confidence_after - self.confidence_before

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValidated": self.is_validated,
            "source": self.source,
            "matches": {
                "colors": [m.to_dict() for m in self.color_matches],
                "fonts": [m.to_dict() for m in self.font_matches],
            },
            "confidence": {
                "before": self.confidence_before,
                "after": self.confidence_after,
                "improvement": self.improvement,
            },
            "suggestions": list(self.suggestions),
        }


@runtime_checkable
class DocumentationValidator(Protocol):
    """Validates a snapshot against authoritative documentation."""

    def validate(self, tokens: TokenSet) -> ValidationResult:
        ...


class NoOpValidator:
    """Used when no documentation source is available."""

    def validate(self, tokens: TokenSet) -> ValidationResult:
        return ValidationResult(is_validated=False)


def resolve_validator(candidate: Any = None) -> DocumentationValidator:
    """
    Pick the validator to use for the lifetime of a component.

    Anything with a callable validate() qualifies; everything else
    (including None) resolves to NoOpValidator.
    """
    if candidate is not None and isinstance(candidate, DocumentationValidator):
        return candidate
    if candidate is not None:
        logger.warning(
            f"{VALIDATION} {type(candidate).__name__} has no validate(); "
            f"documentation validation disabled"
        )
    return NoOpValidator()


__all__ = [
    "DEFAULT_CONFIDENCE",
    "MatchStatus",
    "TokenMatch",
    "ValidationResult",
    "DocumentationValidator",
    "NoOpValidator",
    "resolve_validator",
]
