from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.validation_issue import ValidationIssue

"""Validation log buffering.

Failed field validations from a batch run are buffered and written as JSON
Lines to ``<log_dir>/validation-YYYYMMDD-HHMMSS.log`` (UTC). The file name is
fixed on first access so repeated flushes in one run append to one file.
"""

__all__ = [
    "ValidationIssue",
    "ValidationLogBuffer",
]

DEFAULT_LOG_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ValidationLogBuffer:
    """In-memory buffer of validation issues. ``flush`` appends JSON Lines."""

    def __init__(self, log_dir: Path | None = None) -> None:
        self.log_dir = Path(log_dir) if log_dir is not None else DEFAULT_LOG_DIR
        self._records: list[ValidationIssue] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.log_dir / f"validation-{stamp}.log"
        return self._file_path

    def append(self, issue: ValidationIssue) -> None:
        self._records.append(issue)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered issues. Returns the log path, or None when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
