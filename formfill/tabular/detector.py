from __future__ import annotations

from .parser import RawMatrix

"""Transposed layout detection.

A transposed sheet has one entity per column and one attribute per row. The
check is a heuristic over the first two rows and can misfire on small
standard sheets whose first header is blank, "Name" or "Column 1"; callers
must tolerate an implausible record set rather than crash.
"""

__all__ = [
    "TRANSPOSED_CORNER_LABELS",
    "MIN_TRANSPOSED_COLUMNS",
    "detect_transposed",
]

# Accepted values of the top-left cell of a transposed sheet
TRANSPOSED_CORNER_LABELS = frozenset({"", "column 1", "name"})
# Row 0 must have more cells than this (label column + at least 3 entities)
MIN_TRANSPOSED_COLUMNS = 3


def _first_cell(row: list[str]) -> str:
    return (row[0] if row else "").strip().lower()


def detect_transposed(matrix: RawMatrix) -> bool:
    """Return True when the matrix looks like a column-per-entity layout."""
    if len(matrix) < 2:
        return False
    first_row, second_row = matrix[0], matrix[1]
    return (
        _first_cell(first_row) in TRANSPOSED_CORNER_LABELS
        and _first_cell(second_row) != ""
        and len(first_row) > MIN_TRANSPOSED_COLUMNS
    )
