from __future__ import annotations

from ..models.results import FieldClass

"""Field-name classification for formatting and validation.

Substring match on the lower-cased field name, first match wins:
email > zip|postal > phone|tel > date > state (unless the name also mentions
a license) > none.
"""

__all__ = [
    "classify_field",
]

_RULES: tuple[tuple[FieldClass, tuple[str, ...]], ...] = (
    (FieldClass.EMAIL, ("email",)),
    (FieldClass.ZIP, ("zip", "postal")),
    (FieldClass.PHONE, ("phone", "tel")),
    (FieldClass.DATE, ("date",)),
)


def classify_field(field_name: str) -> FieldClass:
    name = field_name.lower()
    for field_class, needles in _RULES:
        if any(needle in name for needle in needles):
            return field_class
    if "state" in name and "license" not in name:
        return FieldClass.STATE
    return FieldClass.NONE
