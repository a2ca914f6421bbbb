from __future__ import annotations

import json
from dataclasses import asdict, dataclass

from .saved_mapping import utc_timestamp

"""ValidationIssue model for the validation log.

One JSON Lines entry per field that failed validation during a batch run. The
key set is fixed: timestamp, template, record, field, value, error.
"""

__all__ = [
    "ValidationIssue",
]


@dataclass(frozen=True)
class ValidationIssue:
    """Structured validation warning.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        template: Template file name the batch was planned for
        record: Identifying value of the record (see ``identity_value``)
        field: Template field name
        value: The raw value that failed validation
        error: Human readable reason
    """
    timestamp: str
    template: str
    record: str
    field: str
    value: str
    error: str

    @staticmethod
    def create(template: str, record: str, field: str, value: str, error: str) -> ValidationIssue:
        return ValidationIssue(
            timestamp=utc_timestamp(),
            template=template,
            record=record,
            field=field,
            value=value,
            error=error,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
