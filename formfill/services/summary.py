from __future__ import annotations

from ..models.batch_result import BatchResult

"""SUMMARY line rendering."""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # Avoid scientific notation for very small numbers
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: BatchResult) -> str:
    """Render the SUMMARY line for a batch run.

    Format:
    SUMMARY records={n} fields={f} mapped={m} unmapped={u} filled={k}
    warnings={w} elapsed_sec={s}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = BatchResult(
        ...     template_name="form.pdf", total_records=3, total_fields=5,
        ...     mapped_fields=4, filled_records=0, warnings=1,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY records=3 fields=5 mapped=4 unmapped=1 filled=0 warnings=1 elapsed_sec=2'
    """
    return (
        f"SUMMARY records={result.total_records} "
        f"fields={result.total_fields} "
        f"mapped={result.mapped_fields} "
        f"unmapped={result.unmapped_fields} "
        f"filled={result.filled_records} "
        f"warnings={result.warnings} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
