from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..models.config_models import DEFAULT_HISTORY_LIMIT
from ..models.saved_mapping import FillHistoryEntry, SavedMapping, utc_timestamp
from .store import MappingStore

"""Saved mapping templates, fill history and settings on top of a MappingStore.

Key scheme:
    formfill_mappings  list of SavedMapping dicts, one per template file name
    formfill_history   list of FillHistoryEntry dicts, newest first
    formfill_settings  dict of user settings (default data source)

Malformed entries in the store are skipped with a warning so a hand-edited or
stale store never prevents a session from starting.
"""

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "STORAGE_KEYS",
    "MappingImportError",
    "clear_history",
    "default_data_source",
    "export_mapping",
    "get_history",
    "get_mapping_for_template",
    "get_saved_mappings",
    "import_mapping",
    "remember_data_source",
    "save_mapping_template",
    "save_to_history",
]

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "mappings": "formfill_mappings",
    "history": "formfill_history",
    "settings": "formfill_settings",
}


class MappingImportError(Exception):
    """Raised when an exported mapping template cannot be imported."""


def _load_list(store: MappingStore, key: str) -> list[dict[str, Any]]:
    data = store.get(key)
    if data is None:
        return []
    if not isinstance(data, list):
        logger.warning(f"store key {key!r} is not a list, ignoring")
        return []
    return [item for item in data if isinstance(item, dict)]


def get_saved_mappings(store: MappingStore) -> list[SavedMapping]:
    saved: list[SavedMapping] = []
    for raw in _load_list(store, STORAGE_KEYS["mappings"]):
        try:
            saved.append(SavedMapping.from_dict(raw))
        except (KeyError, TypeError) as e:
            logger.warning(f"skipping malformed saved mapping: {e}")
    return saved


def _put_mappings(store: MappingStore, templates: list[SavedMapping]) -> None:
    store.put(STORAGE_KEYS["mappings"], [t.to_dict() for t in templates])


def save_mapping_template(
    store: MappingStore,
    template_name: str,
    template_fields: Iterable[str],
    mappings: Mapping[str, str],
) -> SavedMapping:
    """Insert or update the mapping template for ``template_name``.

    An existing entry keeps its field list and ``created_at``; its mappings and
    ``last_used`` are replaced.
    """
    existing = get_saved_mappings(store)
    for index, template in enumerate(existing):
        if template.template_name == template_name:
            updated = SavedMapping(
                template_name=template.template_name,
                template_fields=template.template_fields,
                mappings=dict(mappings),
                created_at=template.created_at,
                last_used=utc_timestamp(),
            )
            existing[index] = updated
            break
    else:
        updated = SavedMapping.create(template_name, list(template_fields), dict(mappings))
        existing.append(updated)
    _put_mappings(store, existing)
    return updated


def get_mapping_for_template(store: MappingStore, template_name: str) -> dict[str, str] | None:
    for template in get_saved_mappings(store):
        if template.template_name == template_name:
            return dict(template.mappings)
    return None


def save_to_history(
    store: MappingStore,
    record_name: str,
    template_name: str,
    mappings: Mapping[str, str],
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> FillHistoryEntry:
    """Prepend a history entry, keeping at most ``limit`` entries."""
    entry = FillHistoryEntry(
        record_name=record_name,
        template_name=template_name,
        mappings=dict(mappings),
    )
    history = _load_list(store, STORAGE_KEYS["history"])
    history.insert(0, entry.to_dict())
    store.put(STORAGE_KEYS["history"], history[:limit])
    return entry


def get_history(store: MappingStore) -> list[FillHistoryEntry]:
    return [FillHistoryEntry.from_dict(raw) for raw in _load_list(store, STORAGE_KEYS["history"])]


def clear_history(store: MappingStore) -> None:
    store.delete(STORAGE_KEYS["history"])


def export_mapping(store: MappingStore, template_name: str) -> str | None:
    """Pretty JSON of the saved template for ``template_name``, or None."""
    for template in get_saved_mappings(store):
        if template.template_name == template_name:
            return json.dumps(template.to_dict(), indent=2, ensure_ascii=False)
    return None


def import_mapping(store: MappingStore, text: str) -> SavedMapping:
    """Add or replace a saved template from exported JSON.

    Raises:
        MappingImportError: if ``text`` is not JSON or lacks required keys
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MappingImportError(f"invalid mapping JSON: {e}") from e
    if not isinstance(data, dict):
        raise MappingImportError("mapping JSON must be an object")
    try:
        template = SavedMapping.from_dict(data)
    except (KeyError, TypeError) as e:
        raise MappingImportError(f"invalid mapping template: {e}") from e

    existing = get_saved_mappings(store)
    for index, current in enumerate(existing):
        if current.template_name == template.template_name:
            existing[index] = template
            break
    else:
        existing.append(template)
    _put_mappings(store, existing)
    return template


def _settings(store: MappingStore) -> dict[str, Any]:
    data = store.get(STORAGE_KEYS["settings"])
    return data if isinstance(data, dict) else {}


def remember_data_source(store: MappingStore, path: str) -> None:
    settings = _settings(store)
    settings["default_data_file"] = path
    store.put(STORAGE_KEYS["settings"], settings)


def default_data_source(store: MappingStore) -> str | None:
    value = _settings(store).get("default_data_file")
    return value if isinstance(value, str) and value else None
