from __future__ import annotations

import logging

from ..models.record_set import Record, RecordSet, identity_value
from .detector import detect_transposed
from .parser import RawMatrix

"""Matrix -> RecordSet normalization.

Two paths produce the same shape:

- standard (row per entity): row 0 is the header, every other non-blank row is
  a record.
- transposed (column per entity): row 0 holds entity names, every other row
  with a label in its first cell is an attribute.

Both paths end with the termed filter: records whose identifying value
contains "termed" (any case) are dropped.
"""

__all__ = [
    "NoHeadersError",
    "TERMED_MARKER",
    "build_records",
    "filter_termed",
    "is_termed",
    "normalize_matrix",
    "record_set_to_matrix",
    "standardize",
]

logger = logging.getLogger(__name__)

TERMED_MARKER = "termed"
NAME_KEY = "Name"


class NoHeadersError(Exception):
    """Raised when the header row has no usable (non-empty) column names."""


def _cell(row: list[str], index: int) -> str:
    return (row[index] if index < len(row) else "").strip()


def is_termed(value: str) -> bool:
    return TERMED_MARKER in value.lower()


def standardize(matrix: RawMatrix) -> RecordSet:
    """Convert a transposed matrix into records.

    Row 0, cells 1..end, are entity names. Rows whose first cell is empty are
    discarded. Each record starts with ``Name`` followed by the attribute labels
    in top-to-bottom order.
    """
    if not matrix:
        return RecordSet(columns=[], records=[], transposed=True)

    names = matrix[0][1:]
    attribute_rows = [row for row in matrix[1:] if _cell(row, 0)]
    labels = [_cell(row, 0) for row in attribute_rows]

    columns: list[str] = [NAME_KEY]
    for label in labels:
        if label not in columns:
            columns.append(label)

    records: list[Record] = []
    termed = 0
    for index, raw_name in enumerate(names):
        name = raw_name.strip()
        if not name:
            continue
        if is_termed(name):
            termed += 1
            continue
        record: Record = {NAME_KEY: name}
        for label, row in zip(labels, attribute_rows):
            record[label] = _cell(row, index + 1)
        records.append(record)

    return RecordSet(columns=columns, records=records, transposed=True, termed_count=termed)


def build_records(matrix: RawMatrix) -> RecordSet:
    """Convert a standard matrix (header in row 0) into records.

    Empty header cells are dropped without renumbering, so a header at column
    ``j`` always binds ``row[j]``.

    Raises:
        NoHeadersError: if no header cell is non-empty after trimming
    """
    header_row = matrix[0] if matrix else []
    headers: list[tuple[int, str]] = []
    seen: set[str] = set()
    for position, raw in enumerate(header_row):
        name = raw.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        headers.append((position, name))
    if not headers:
        raise NoHeadersError(
            "No headers found in spreadsheet. Please ensure the first row contains column names."
        )

    records: list[Record] = []
    for row in matrix[1:]:
        if not any(cell.strip() for cell in row):
            continue
        records.append({name: _cell(row, position) for position, name in headers})

    return RecordSet(columns=[name for _, name in headers], records=records)


def filter_termed(record_set: RecordSet) -> RecordSet:
    """Drop records whose identifying value contains the termed marker."""
    kept = [r for r in record_set.records if not is_termed(identity_value(r))]
    dropped = len(record_set.records) - len(kept)
    if dropped:
        logger.debug(f"termed filter dropped {dropped} record(s)")
    return RecordSet(
        columns=record_set.columns,
        records=kept,
        transposed=record_set.transposed,
        termed_count=record_set.termed_count + dropped,
    )


def normalize_matrix(matrix: RawMatrix) -> RecordSet:
    """Detect the layout of ``matrix`` and return the filtered RecordSet.

    Raises:
        NoHeadersError: standard layout without usable headers
    """
    if not matrix:
        return RecordSet(columns=[], records=[])
    if detect_transposed(matrix):
        logger.info(f"transposed layout detected ({len(matrix[0]) - 1} entity columns)")
        record_set = standardize(matrix)
    else:
        record_set = build_records(matrix)
    return filter_termed(record_set)


def record_set_to_matrix(record_set: RecordSet) -> RawMatrix:
    """Header row followed by one row per record (standard layout)."""
    matrix: RawMatrix = [list(record_set.columns)]
    for record in record_set.records:
        matrix.append([record.get(column, "") for column in record_set.columns])
    return matrix
