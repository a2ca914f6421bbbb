from __future__ import annotations

from dataclasses import dataclass, field

"""RecordSet model.

A RecordSet is the normalized output of a tabular source: an ordered list of
records (insertion-ordered ``dict[str, str]``) that all share the same keys,
in the same order, as ``columns``.
"""

__all__ = [
    "Record",
    "RecordSet",
    "IDENTITY_KEYS",
    "identity_value",
]

Record = dict[str, str]

# Keys consulted, in order, for the value that identifies a record
IDENTITY_KEYS = ("Name", "name", "Provider Name", "Full Name")


@dataclass(frozen=True)
class RecordSet:
    """Normalized records from a single tabular source."""
    columns: list[str]  # Header order shared by every record
    records: list[Record] = field(default_factory=list)
    transposed: bool = False  # Built from a column-per-entity layout
    termed_count: int = 0  # Records dropped by the termed filter

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


def identity_value(record: Record) -> str:
    """Best-guess identifying value of a record.

    First non-empty value among IDENTITY_KEYS, else the value of the first key,
    else the empty string.
    """
    for key in IDENTITY_KEYS:
        value = record.get(key)
        if value:
            return value
    for value in record.values():
        return value
    return ""
