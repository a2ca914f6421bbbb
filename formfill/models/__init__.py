"""Domain models for the form filling tool."""

from .batch_result import BatchResult, FieldIssue, RecordFillPlan
from .config_models import FormFillConfig
from .record_set import IDENTITY_KEYS, Record, RecordSet, identity_value
from .results import FieldClass, FormatResult, MatchResult, MatchStrategy, ValidationResult
from .saved_mapping import FillHistoryEntry, SavedMapping
from .template_field import FieldKind, TemplateField
from .validation_issue import ValidationIssue

__all__ = [
    # Configuration models
    "FormFillConfig",
    # Tabular models
    "IDENTITY_KEYS",
    "Record",
    "RecordSet",
    "identity_value",
    # Template / mapping models
    "FieldKind",
    "TemplateField",
    "SavedMapping",
    "FillHistoryEntry",
    # Best-effort results
    "FieldClass",
    "FormatResult",
    "MatchResult",
    "MatchStrategy",
    "ValidationResult",
    # Batch models
    "BatchResult",
    "FieldIssue",
    "RecordFillPlan",
    "ValidationIssue",
]
