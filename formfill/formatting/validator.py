from __future__ import annotations

import re
from collections.abc import Callable

from ..models.results import FieldClass, ValidationResult
from .classify import classify_field
from .formatter import digits_only

"""Per-field value validation.

Validation is display-only: a failed result becomes a warning, never a
blocked fill. Empty values are always valid (required-ness is not checked
here). Validation does not depend on formatting and can run on raw or
formatted values.
"""

__all__ = [
    "EMAIL_ERROR",
    "PHONE_ERROR",
    "ZIP_ERROR",
    "validate_email",
    "validate_for_class",
    "validate_phone",
    "validate_state",
    "validate_value",
    "validate_zip",
]

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

EMAIL_ERROR = "Invalid email format"
PHONE_ERROR = "Phone number must be 10-11 digits"
ZIP_ERROR = "ZIP code must be 5 or 9 digits"


def validate_email(value: str) -> ValidationResult:
    if not EMAIL_RE.match(value):
        return ValidationResult.invalid(EMAIL_ERROR)
    return ValidationResult.ok()


def validate_phone(value: str) -> ValidationResult:
    if len(digits_only(value)) not in (10, 11):
        return ValidationResult.invalid(PHONE_ERROR)
    return ValidationResult.ok()


def validate_zip(value: str) -> ValidationResult:
    if len(digits_only(value)) not in (5, 9):
        return ValidationResult.invalid(ZIP_ERROR)
    return ValidationResult.ok()


def validate_state(value: str) -> ValidationResult:
    # Abbreviations and full state names are both accepted
    return ValidationResult.ok()


_VALIDATORS: dict[FieldClass, Callable[[str], ValidationResult]] = {
    FieldClass.EMAIL: validate_email,
    FieldClass.PHONE: validate_phone,
    FieldClass.ZIP: validate_zip,
    FieldClass.STATE: validate_state,
}


def validate_for_class(field_class: FieldClass, value: str) -> ValidationResult:
    rule = _VALIDATORS.get(field_class)
    if not value or rule is None:
        return ValidationResult.ok()
    return rule(value)


def validate_value(field_name: str, value: str) -> ValidationResult:
    """Validate ``value`` for the template field called ``field_name``."""
    return validate_for_class(classify_field(field_name), value)
