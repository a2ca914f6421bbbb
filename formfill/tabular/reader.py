from __future__ import annotations

import logging
from pathlib import Path

import chardet
import pandas as pd

from ..models.record_set import RecordSet
from .normalize import normalize_matrix
from .parser import RawMatrix, parse

"""Tabular source reader.

Turns an uploaded file into a RawMatrix and then a RecordSet:

- .csv: bytes are decoded (UTF-8 first, chardet guess second, cp1252 last) and
  handed to ``parse``.
- .xlsx / .xls: the first sheet is read with pandas, header-less, every value
  stringified and blank cells as "". Rows that are blank in every cell are
  dropped so the matrix has the same shape ``parse`` gives for a CSV export.
  Reading .xls needs the optional xlrd engine (``formfill[excel-legacy]``).
"""

__all__ = [
    "TEXT_FORMATS",
    "WORKBOOK_FORMATS",
    "UnsupportedFormatError",
    "WorkbookReadError",
    "decode_text",
    "decode_workbook",
    "load_record_set",
    "read_matrix",
]

logger = logging.getLogger(__name__)

TEXT_FORMATS = {".csv"}
WORKBOOK_FORMATS = {".xlsx", ".xls"}


class UnsupportedFormatError(Exception):
    """Raised for file extensions that are neither CSV nor a workbook."""


class WorkbookReadError(Exception):
    """Raised when a workbook cannot be opened or parsed."""


def decode_text(raw: bytes) -> str:
    """Decode uploaded text, tolerating non-UTF-8 exports."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    detected = chardet.detect(raw).get("encoding")
    if detected:
        try:
            text = raw.decode(detected)
            logger.debug(f"decoded text as {detected}")
            return text
        except (LookupError, UnicodeDecodeError):
            pass
    return raw.decode("cp1252", errors="replace")


def _stringify(value: object) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value)


def decode_workbook(path: Path) -> RawMatrix:
    """Read the first sheet of a workbook into a RawMatrix.

    Raises:
        WorkbookReadError: corrupt or unrecognised workbook, or a missing engine
    """
    try:
        df = pd.read_excel(path, sheet_name=0, header=None, dtype=str, keep_default_na=False)
    except ImportError as e:
        if path.suffix.lower() == ".xls":
            raise WorkbookReadError(
                f"cannot read {path.name}: .xls files require xlrd "
                "(pip install 'formfill[excel-legacy]')"
            ) from e
        raise WorkbookReadError(f"cannot read {path.name}: {e}") from e
    except Exception as e:
        raise WorkbookReadError(f"cannot read workbook {path.name}: {e}") from e
    matrix: RawMatrix = []
    for raw in df.itertuples(index=False, name=None):
        row = [_stringify(v) for v in raw]
        if not any(cell.strip() for cell in row):
            continue
        matrix.append(row)
    return matrix


def read_matrix(path: Path) -> RawMatrix:
    """Read ``path`` into a RawMatrix according to its extension.

    Raises:
        FileNotFoundError: if ``path`` does not exist
        UnsupportedFormatError: for extensions other than .csv / .xlsx / .xls
        WorkbookReadError: from ``decode_workbook``
    """
    suffix = path.suffix.lower()
    if suffix not in TEXT_FORMATS | WORKBOOK_FORMATS:
        raise UnsupportedFormatError(
            f"Unsupported file type '{suffix or path.name}'. "
            "Please upload a CSV or Excel file (.csv, .xlsx, .xls)"
        )
    if not path.exists():
        raise FileNotFoundError(f"data file not found: {path}")
    if suffix in TEXT_FORMATS:
        return parse(decode_text(path.read_bytes()))
    return decode_workbook(path)


def load_record_set(path: Path) -> RecordSet:
    """Read, detect layout, normalize and filter a tabular source.

    Raises:
        FileNotFoundError, UnsupportedFormatError, WorkbookReadError: from ``read_matrix``
        NoHeadersError: standard layout without usable headers
    """
    matrix = read_matrix(path)
    record_set = normalize_matrix(matrix)
    layout = "transposed" if record_set.transposed else "standard"
    logger.info(
        f"loaded {path.name}: layout={layout} records={len(record_set)} "
        f"columns={len(record_set.columns)} termed={record_set.termed_count}"
    )
    return record_set
