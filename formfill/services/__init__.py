"""Batch planning, progress display and SUMMARY rendering."""

from .orchestrator import DocumentFiller, build_fill_values, run_batch, validate_record
from .progress import ProgressTracker, is_tty_enabled
from .summary import render_summary_line

__all__ = [
    "DocumentFiller",
    "ProgressTracker",
    "build_fill_values",
    "is_tty_enabled",
    "render_summary_line",
    "run_batch",
    "validate_record",
]
