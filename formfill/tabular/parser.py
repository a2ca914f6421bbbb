from __future__ import annotations

"""Delimited text parser and renderer.

``parse`` is a permissive RFC4180-style scanner: quoted fields may span line
breaks, ``""`` inside quotes is a literal quote, every field is trimmed when it
is closed and lines that are blank after trimming never produce a row. It does
not know about headers; the first row comes back as ordinary data.
"""

__all__ = [
    "RawMatrix",
    "parse",
    "render_delimited",
]

RawMatrix = list[list[str]]

_NEEDS_QUOTING = (",", '"', "\n", "\r")


def parse(text: str) -> RawMatrix:
    """Parse comma-delimited text into a matrix of trimmed strings."""
    rows: RawMatrix = []
    row: list[str] = []
    current: list[str] = []
    in_quotes = False
    line_has_content = False

    def close_field() -> None:
        row.append("".join(current).strip())
        current.clear()

    def close_row() -> None:
        nonlocal row, line_has_content
        if line_has_content:
            close_field()
            rows.append(row)
        row = []
        current.clear()
        line_has_content = False

    i = 0
    n = len(text)
    while i < n:
        char = text[i]
        if char == '"':
            line_has_content = True
            if in_quotes and i + 1 < n and text[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            line_has_content = True
            close_field()
        elif char in ("\n", "\r") and not in_quotes:
            close_row()
            if char == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
        else:
            if not char.isspace():
                line_has_content = True
            current.append(char)
        i += 1

    # Last row without a trailing line break
    close_row()
    return rows


def _render_cell(cell: str) -> str:
    if any(c in cell for c in _NEEDS_QUOTING):
        return '"' + cell.replace('"', '""') + '"'
    return cell


def _render_row(row: list[str]) -> str:
    # A lone empty cell would render as a blank line, which parse skips
    if len(row) == 1 and not row[0]:
        return '""'
    return ",".join(_render_cell(cell) for cell in row)


def render_delimited(matrix: RawMatrix) -> str:
    """Render a matrix as comma-delimited text that ``parse`` reads back unchanged."""
    return "\n".join(_render_row(row) for row in matrix)
