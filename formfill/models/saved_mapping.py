from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any

"""Persisted mapping template and fill history models.

Both are stored as plain dicts in the mapping store, so each model has a
``to_dict`` / ``from_dict`` pair. Timestamps are ISO8601 UTC strings with a
'Z' suffix.
"""

__all__ = [
    "FillHistoryEntry",
    "SavedMapping",
    "utc_timestamp",
]


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class SavedMapping:
    """Mapping template remembered for one document template (keyed by file name)."""
    template_name: str
    template_fields: list[str]
    mappings: dict[str, str]
    created_at: str
    last_used: str

    @staticmethod
    def create(template_name: str, template_fields: list[str], mappings: dict[str, str]) -> SavedMapping:
        ts = utc_timestamp()
        return SavedMapping(
            template_name=template_name,
            template_fields=list(template_fields),
            mappings=dict(mappings),
            created_at=ts,
            last_used=ts,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> SavedMapping:
        """Build from a stored dict.

        Raises:
            KeyError: if ``template_name`` or ``mappings`` is missing
            TypeError: if ``mappings`` is not a dict
        """
        mappings = data["mappings"]
        if not isinstance(mappings, dict):
            raise TypeError(f"mappings must be an object, got {type(mappings).__name__}")
        ts = utc_timestamp()
        return SavedMapping(
            template_name=str(data["template_name"]),
            template_fields=[str(f) for f in data.get("template_fields") or []],
            mappings={str(k): "" if v is None else str(v) for k, v in mappings.items()},
            created_at=data.get("created_at") or ts,
            last_used=data.get("last_used") or ts,
        )


@dataclass(frozen=True)
class FillHistoryEntry:
    """One filled document."""
    record_name: str
    template_name: str
    mappings: dict[str, str]
    filled_at: str = field(default_factory=utc_timestamp)
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> FillHistoryEntry:
        return FillHistoryEntry(
            record_name=str(data.get("record_name", "")),
            template_name=str(data.get("template_name", "")),
            mappings=dict(data.get("mappings") or {}),
            filled_at=data.get("filled_at") or utc_timestamp(),
            id=data.get("id") or uuid.uuid4().hex[:12],
        )
