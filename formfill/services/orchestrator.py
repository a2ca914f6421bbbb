from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

from ..formatting.classify import classify_field
from ..formatting.formatter import format_for_class
from ..formatting.validator import validate_for_class
from ..logging.validation_log import ValidationLogBuffer
from ..mapping.store import MappingStore
from ..mapping.templates import save_to_history
from ..models.batch_result import BatchResult, FieldIssue, RecordFillPlan
from ..models.config_models import DEFAULT_HISTORY_LIMIT
from ..models.record_set import Record, RecordSet, identity_value
from ..models.results import FieldClass
from ..models.template_field import TemplateField
from ..models.validation_issue import ValidationIssue
from .progress import ProgressTracker

"""Batch fill planning.

For every record of a RecordSet the mapped template fields are resolved to
formatted text (a RecordFillPlan). Failed validations are collected per record
and written to the validation log; they never block a fill. Producing the
filled document itself is delegated to an injected DocumentFiller.
"""

__all__ = [
    "DocumentFiller",
    "build_fill_values",
    "run_batch",
    "validate_record",
]

logger = logging.getLogger(__name__)


class DocumentFiller(Protocol):
    """Writes formatted values into one copy of a template."""

    def fill(self, template_name: str, record_name: str, values: Mapping[str, str]) -> Any: ...


def _text_fields(fields: Iterable[TemplateField]) -> list[TemplateField]:
    return [f for f in fields if not f.kind.is_toggle]


def _mapped_pairs(
    fields: Iterable[TemplateField], mapping: Mapping[str, str]
) -> list[tuple[TemplateField, str, FieldClass]]:
    """(field, column, class) for every text field with a non-empty mapping."""
    pairs = []
    for f in _text_fields(fields):
        column = mapping.get(f.name, "")
        if column:
            pairs.append((f, column, classify_field(f.name)))
    return pairs


def build_fill_values(
    record: Record, mapping: Mapping[str, str], fields: Iterable[TemplateField]
) -> dict[str, str]:
    """Formatted text for every mapped field whose value is non-empty.

    Checkbox and radio fields are never filled. Fields without a mapping or
    whose column is missing or empty in ``record`` are omitted.
    """
    values: dict[str, str] = {}
    for f, column, field_class in _mapped_pairs(fields, mapping):
        raw = record.get(column, "")
        if not raw:
            continue
        values[f.name] = format_for_class(field_class, raw).value
    return values


def validate_record(
    record: Record, mapping: Mapping[str, str], fields: Iterable[TemplateField]
) -> list[FieldIssue]:
    """Validate the raw mapped values of one record."""
    issues: list[FieldIssue] = []
    for f, column, field_class in _mapped_pairs(fields, mapping):
        raw = record.get(column, "")
        result = validate_for_class(field_class, raw)
        if not result.is_valid:
            issues.append(FieldIssue(field=f.name, value=raw, error=result.error or ""))
    return issues


def run_batch(
    template_name: str,
    fields: list[TemplateField],
    record_set: RecordSet,
    mapping: Mapping[str, str],
    filler: DocumentFiller | None = None,
    store: MappingStore | None = None,
    *,
    log_dir: Path | None = None,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> BatchResult:
    """Plan (and optionally perform) one fill per record.

    Args:
        template_name: Name recorded in history and in the validation log
        fields: Template fields; toggle kinds are ignored
        record_set: Normalized records
        mapping: Template field -> column
        filler: When given, called once per record with the formatted values
        store: When given together with ``filler``, a history entry is saved
            for every filled record
        log_dir: Validation log directory (default ``./logs``)
        history_limit: Maximum history entries kept in ``store``

    Returns:
        BatchResult with one RecordFillPlan per record
    """
    start_time = datetime.now(UTC)
    validation_log = ValidationLogBuffer(log_dir)

    text_fields = _text_fields(fields)
    used_mapping = {f.name: mapping[f.name] for f in text_fields if mapping.get(f.name)}

    plans: list[RecordFillPlan] = []
    filled_count = 0
    warning_count = 0

    with ProgressTracker(len(record_set)) as progress:
        for index, record in enumerate(record_set):
            record_name = identity_value(record)
            progress.start_record(record_name)

            values = build_fill_values(record, used_mapping, text_fields)
            issues = validate_record(record, used_mapping, text_fields)
            for issue in issues:
                logger.warning(
                    f"validation warning record={record_name!r} field={issue.field!r} "
                    f"error={issue.error}"
                )
                validation_log.append(
                    ValidationIssue.create(
                        template=template_name,
                        record=record_name,
                        field=issue.field,
                        value=issue.value,
                        error=issue.error,
                    )
                )
            warning_count += len(issues)

            filled = False
            if filler is not None:
                try:
                    filler.fill(template_name, record_name, values)
                except Exception as e:
                    logger.error(f"fill failed record={record_name!r}: {e}")
                else:
                    filled = True
                    filled_count += 1
                    if store is not None:
                        save_to_history(
                            store, record_name, template_name, used_mapping, limit=history_limit
                        )

            plans.append(
                RecordFillPlan(
                    index=index,
                    record_name=record_name,
                    values=values,
                    issues=issues,
                    filled=filled,
                )
            )
            progress.set_postfix(warnings=warning_count)
            progress.finish_record()

    log_path = validation_log.flush()
    if log_path is not None:
        logger.info(f"validation log written: {log_path}")

    end_time = datetime.now(UTC)
    return BatchResult(
        template_name=template_name,
        total_records=len(record_set),
        total_fields=len(text_fields),
        mapped_fields=len(used_mapping),
        filled_records=filled_count,
        warnings=warning_count,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        plans=plans,
    )
