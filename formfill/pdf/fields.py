from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import fitz  # PyMuPDF

from ..models.template_field import FieldKind, TemplateField

"""Template field extraction from fillable PDFs (AcroForm widgets).

Field kind is decided here, once, from the widget type; the rest of the code
only looks at ``TemplateField.kind``.
"""

__all__ = [
    "TemplateReadError",
    "extract_template_fields",
    "mappable_fields",
    "widget_kind",
]

logger = logging.getLogger(__name__)

_CHECKBOX = getattr(fitz, "PDF_WIDGET_TYPE_CHECKBOX", 2)
_RADIO = getattr(fitz, "PDF_WIDGET_TYPE_RADIOBUTTON", 5)
_LISTBOX = getattr(fitz, "PDF_WIDGET_TYPE_LISTBOX", 4)
_COMBOBOX = getattr(fitz, "PDF_WIDGET_TYPE_COMBOBOX", 3)


class TemplateReadError(Exception):
    """Raised when a template document cannot be opened or read."""


def widget_kind(field_type: int | None, field_type_string: str = "") -> FieldKind:
    """Map a PyMuPDF widget type to a FieldKind (unknown types are text)."""
    ft_str = (field_type_string or "").lower()
    if field_type == _CHECKBOX or "checkbox" in ft_str:
        return FieldKind.CHECKBOX
    if field_type == _RADIO or "radio" in ft_str:
        return FieldKind.RADIO
    if field_type in (_COMBOBOX, _LISTBOX) or any(k in ft_str for k in ("combo", "list")):
        return FieldKind.DROPDOWN
    return FieldKind.TEXT


def extract_template_fields(path: Path) -> list[TemplateField]:
    """Return the template's fields in document order, one entry per field name.

    Raises:
        TemplateReadError: if the document cannot be opened
    """
    try:
        doc = fitz.open(path)
    except (OSError, RuntimeError, ValueError) as e:
        raise TemplateReadError(f"cannot open template {path}: {e}") from e

    fields: list[TemplateField] = []
    seen: set[str] = set()
    with doc:
        for page in doc:
            for widget in page.widgets() or []:
                name = (getattr(widget, "field_name", "") or "").strip()
                if not name or name in seen:
                    continue
                seen.add(name)
                kind = widget_kind(
                    getattr(widget, "field_type", None),
                    getattr(widget, "field_type_string", "") or "",
                )
                fields.append(TemplateField(name=name, kind=kind))
    logger.info(f"template {Path(path).name}: {len(fields)} field(s)")
    return fields


def mappable_fields(fields: Iterable[TemplateField]) -> list[TemplateField]:
    """Fields the auto-mapper should see (checkbox and radio removed)."""
    return [f for f in fields if not f.kind.is_toggle]
