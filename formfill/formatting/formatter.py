from __future__ import annotations

import re
from collections.abc import Callable

from dateutil import parser as date_parser

from ..models.results import FieldClass, FormatResult
from .classify import classify_field

"""Per-field value formatting.

Every rule returns its input unchanged when it cannot format it; nothing here
raises. ``try_format`` reports whether the value was changed, ``format_value``
returns only the text.
"""

__all__ = [
    "STATE_ABBREVIATIONS",
    "digits_only",
    "format_date",
    "format_email",
    "format_for_class",
    "format_phone",
    "format_state",
    "format_value",
    "format_zip",
    "try_format",
]

_NON_DIGITS = re.compile(r"\D")

STATE_ABBREVIATIONS = {
    "alabama": "AL", "alaska": "AK", "arizona": "AZ", "arkansas": "AR",
    "california": "CA", "colorado": "CO", "connecticut": "CT", "delaware": "DE",
    "florida": "FL", "georgia": "GA", "hawaii": "HI", "idaho": "ID",
    "illinois": "IL", "indiana": "IN", "iowa": "IA", "kansas": "KS",
    "kentucky": "KY", "louisiana": "LA", "maine": "ME", "maryland": "MD",
    "massachusetts": "MA", "michigan": "MI", "minnesota": "MN", "mississippi": "MS",
    "missouri": "MO", "montana": "MT", "nebraska": "NE", "nevada": "NV",
    "new hampshire": "NH", "new jersey": "NJ", "new mexico": "NM", "new york": "NY",
    "north carolina": "NC", "north dakota": "ND", "ohio": "OH", "oklahoma": "OK",
    "oregon": "OR", "pennsylvania": "PA", "rhode island": "RI", "south carolina": "SC",
    "south dakota": "SD", "tennessee": "TN", "texas": "TX", "utah": "UT",
    "vermont": "VT", "virginia": "VA", "washington": "WA", "west virginia": "WV",
    "wisconsin": "WI", "wyoming": "WY", "district of columbia": "DC",
}


def digits_only(value: str) -> str:
    return _NON_DIGITS.sub("", value)


def format_phone(value: str) -> str:
    digits = digits_only(value)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) == 11 and digits[0] == "1":
        return f"+1 ({digits[1:4]}) {digits[4:7]}-{digits[7:]}"
    return value


def format_date(value: str) -> str:
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError):
        return value
    return f"{parsed.month:02d}/{parsed.day:02d}/{parsed.year:04d}"


def format_zip(value: str) -> str:
    digits = digits_only(value)
    if len(digits) == 5:
        return digits
    if len(digits) == 9:
        return f"{digits[:5]}-{digits[5:]}"
    return value


def format_email(value: str) -> str:
    return value.lower().strip()


def format_state(value: str) -> str:
    if len(value) == 2:
        return value.upper()
    return STATE_ABBREVIATIONS.get(value.lower().strip(), value)


_FORMATTERS: dict[FieldClass, Callable[[str], str]] = {
    FieldClass.EMAIL: format_email,
    FieldClass.ZIP: format_zip,
    FieldClass.PHONE: format_phone,
    FieldClass.DATE: format_date,
    FieldClass.STATE: format_state,
}


def format_for_class(field_class: FieldClass, value: str) -> FormatResult:
    """Apply the rule for an already classified field."""
    rule = _FORMATTERS.get(field_class)
    if not value or rule is None:
        return FormatResult(value=value, formatted=False, field_class=field_class)
    result = rule(value)
    return FormatResult(value=result, formatted=result != value, field_class=field_class)


def try_format(field_name: str, value: str) -> FormatResult:
    return format_for_class(classify_field(field_name), value)


def format_value(field_name: str, value: str) -> str:
    """Format ``value`` for the template field called ``field_name``."""
    return try_format(field_name, value).value
