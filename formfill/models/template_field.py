from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""TemplateField model and FieldKind enum.

A TemplateField is one named fillable slot in a document template. The kind is
resolved once when the template is inspected and never re-derived from the
field name downstream.
"""

__all__ = [
    "FieldKind",
    "TemplateField",
]


class FieldKind(Enum):
    """Widget kind of a template field.

    Only TEXT (and DROPDOWN, which accepts a text value) fields are driven
    through the auto-mapper; CHECKBOX and RADIO are filtered by the caller.
    """
    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DROPDOWN = "dropdown"

    @property
    def is_toggle(self) -> bool:
        return self in (FieldKind.CHECKBOX, FieldKind.RADIO)


@dataclass(frozen=True)
class TemplateField:
    """A fillable slot in a document template."""
    name: str  # Unique, non-empty within one template
    kind: FieldKind = FieldKind.TEXT

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("template field name must be non-empty")

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "kind": self.kind.value}
