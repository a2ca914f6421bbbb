"""Field value formatting and validation keyed by field name."""

from .classify import classify_field
from .formatter import format_for_class, format_value, try_format
from .validator import validate_for_class, validate_value

__all__ = [
    "classify_field",
    "format_for_class",
    "format_value",
    "try_format",
    "validate_for_class",
    "validate_value",
]
