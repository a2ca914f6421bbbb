"""Document template inspection."""

from .fields import TemplateReadError, extract_template_fields, mappable_fields, widget_kind

__all__ = [
    "TemplateReadError",
    "extract_template_fields",
    "mappable_fields",
    "widget_kind",
]
