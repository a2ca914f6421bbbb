from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Result models for the best-effort operations.

Matching and formatting never raise; they return one of these results with an
explicit flag telling the caller whether anything was resolved.
"""

__all__ = [
    "FieldClass",
    "FormatResult",
    "MatchResult",
    "MatchStrategy",
    "ValidationResult",
]


class FieldClass(Enum):
    """Value class of a template field, derived from its name."""
    EMAIL = "email"
    ZIP = "zip"
    PHONE = "phone"
    DATE = "date"
    STATE = "state"
    NONE = "none"


class MatchStrategy(Enum):
    PATTERN = "pattern"  # Concept pattern table
    DIRECT = "direct"  # Normalized name containment
    NONE = "none"


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, error: str) -> ValidationResult:
        return cls(is_valid=False, error=error)


@dataclass(frozen=True)
class FormatResult:
    value: str
    formatted: bool  # False when the input was returned unchanged
    field_class: FieldClass = FieldClass.NONE


@dataclass(frozen=True)
class MatchResult:
    column: str | None
    strategy: MatchStrategy = MatchStrategy.NONE
    concept: str | None = None  # Concept key for PATTERN matches

    @property
    def matched(self) -> bool:
        return self.column is not None
