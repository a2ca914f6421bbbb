"""Field auto-mapping, mapping persistence and mapping helpers."""

from .matcher import FIELD_PATTERNS, auto_map, match_field
from .resolve import apply_overrides, parse_override, resolve_mapping
from .store import InMemoryMappingStore, JsonFileMappingStore, MappingStore, MappingStoreError
from .templates import (
    MappingImportError,
    clear_history,
    default_data_source,
    export_mapping,
    get_history,
    get_mapping_for_template,
    get_saved_mappings,
    import_mapping,
    remember_data_source,
    save_mapping_template,
    save_to_history,
)

__all__ = [
    "FIELD_PATTERNS",
    "InMemoryMappingStore",
    "JsonFileMappingStore",
    "MappingImportError",
    "MappingStore",
    "MappingStoreError",
    "apply_overrides",
    "auto_map",
    "clear_history",
    "default_data_source",
    "export_mapping",
    "get_history",
    "get_mapping_for_template",
    "get_saved_mappings",
    "import_mapping",
    "match_field",
    "parse_override",
    "remember_data_source",
    "resolve_mapping",
    "save_mapping_template",
    "save_to_history",
]
