from __future__ import annotations

from collections.abc import Iterable, Mapping

"""Mapping post-processing shared by the CLI and the batch planner."""

__all__ = [
    "apply_overrides",
    "parse_override",
    "resolve_mapping",
]


def resolve_mapping(mapping: Mapping[str, str], columns: Iterable[str]) -> dict[str, str]:
    """Return ``mapping`` with references to unknown columns rendered as "" (skip).

    A saved mapping outlives the record set it was built for; a column that
    disappeared from the source is treated as unset, never as an error.
    """
    known = set(columns)
    return {field: (column if column in known else "") for field, column in mapping.items()}


def apply_overrides(mapping: Mapping[str, str], overrides: Mapping[str, str]) -> dict[str, str]:
    """Apply human overrides on top of ``mapping``; an override always wins."""
    merged = dict(mapping)
    merged.update(overrides)
    return merged


def parse_override(text: str) -> tuple[str, str]:
    """Parse a ``FIELD=COLUMN`` override. An empty COLUMN means skip.

    Raises:
        ValueError: if there is no '=' or FIELD is empty
    """
    field, sep, column = text.partition("=")
    field = field.strip()
    if not sep or not field:
        raise ValueError(f"invalid override {text!r}, expected FIELD=COLUMN")
    return field, column.strip()
