from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

"""Batch planning result models.

A batch run produces one RecordFillPlan per record (the formatted values that
would be written into the template, plus validation issues) and a BatchResult
aggregating counts for the SUMMARY line.
"""

__all__ = [
    "BatchResult",
    "FieldIssue",
    "RecordFillPlan",
]


@dataclass(frozen=True)
class FieldIssue:
    """A single failed validation for one field of one record."""
    field: str
    value: str
    error: str


@dataclass(frozen=True)
class RecordFillPlan:
    """Everything needed to fill one document for one record."""
    index: int  # Position of the record in its RecordSet
    record_name: str  # Identifying value of the record
    values: dict[str, str]  # Template field -> formatted text
    issues: list[FieldIssue] = field(default_factory=list)
    filled: bool = False  # True once a DocumentFiller produced an artifact

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "record_name": self.record_name,
            "values": dict(self.values),
            "issues": [
                {"field": i.field, "value": i.value, "error": i.error} for i in self.issues
            ],
            "filled": self.filled,
        }


@dataclass(frozen=True)
class BatchResult:
    """Aggregated results of a batch run (SUMMARY line source)."""
    template_name: str
    total_records: int
    total_fields: int  # Mappable template fields
    mapped_fields: int  # Fields with a resolved column
    filled_records: int  # Records handed to a DocumentFiller
    warnings: int  # Total failed validations across all records
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    plans: list[RecordFillPlan] | None = None

    @property
    def unmapped_fields(self) -> int:
        return self.total_fields - self.mapped_fields
