from __future__ import annotations

from datetime import UTC, datetime

import pytest

from formfill.models.batch_result import BatchResult
from formfill.services.summary import render_summary_line


def _result(elapsed: float, **overrides) -> BatchResult:
    values = dict(
        template_name="form.pdf",
        total_records=3,
        total_fields=5,
        mapped_fields=4,
        filled_records=0,
        warnings=1,
        start_time=datetime(2024, 1, 1, 10, 0, 0, tzinfo=UTC),
        end_time=datetime(2024, 1, 1, 10, 0, 2, tzinfo=UTC),
        elapsed_seconds=elapsed,
    )
    values.update(overrides)
    return BatchResult(**values)


def test_render_summary_line_format():
    assert render_summary_line(_result(2.0)) == (
        "SUMMARY records=3 fields=5 mapped=4 unmapped=1 filled=0 warnings=1 elapsed_sec=2"
    )


@pytest.mark.parametrize(
    "elapsed,expected",
    [(0.0, "0"), (1.5, "1.5"), (0.1234, "0.123"), (0.005, "0.005")],
)
def test_elapsed_formatting(elapsed, expected):
    assert render_summary_line(_result(elapsed)).endswith(f"elapsed_sec={expected}")


def test_unmapped_is_fields_minus_mapped():
    assert _result(0.0, total_fields=7, mapped_fields=2).unmapped_fields == 5
