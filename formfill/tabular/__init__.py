"""Tabular ingestion: parse, detect layout, normalize into records."""

from .detector import detect_transposed
from .normalize import (
    NoHeadersError,
    build_records,
    filter_termed,
    normalize_matrix,
    record_set_to_matrix,
    standardize,
)
from .parser import RawMatrix, parse, render_delimited
from .reader import UnsupportedFormatError, load_record_set, read_matrix

__all__ = [
    "NoHeadersError",
    "RawMatrix",
    "UnsupportedFormatError",
    "build_records",
    "detect_transposed",
    "filter_termed",
    "load_record_set",
    "normalize_matrix",
    "parse",
    "read_matrix",
    "record_set_to_matrix",
    "render_delimited",
    "standardize",
]
