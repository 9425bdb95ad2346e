# tokenpulse/validation/__init__.py
"""
Optional documentation validation.

Usage:
    from tokenpulse.validation import ReferenceDocsValidator, resolve_validator

    validator = resolve_validator(ReferenceDocsValidator(docs_text))
    result = validator.validate(snapshot)
"""

from .base import (
    DEFAULT_CONFIDENCE,
    DocumentationValidator,
    MatchStatus,
    NoOpValidator,
    TokenMatch,
    ValidationResult,
    resolve_validator,
)
from .reference import ReferenceDocsValidator

__all__ = [
    "DEFAULT_CONFIDENCE",
    "DocumentationValidator",
    "MatchStatus",
    "NoOpValidator",
    "ReferenceDocsValidator",
    "TokenMatch",
    "ValidationResult",
    "resolve_validator",
]
