from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Protocol

"""Key-value mapping store.

Mapping templates, fill history and settings are persisted through this
interface only. Values must be JSON-compatible. Readers tolerate an empty,
stale or concurrently rewritten store; the last write wins.
"""

__all__ = [
    "InMemoryMappingStore",
    "JsonFileMappingStore",
    "MappingStore",
    "MappingStoreError",
]

logger = logging.getLogger(__name__)


class MappingStoreError(Exception):
    """Raised when a store backend cannot be written."""


class MappingStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def put(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryMappingStore:
    """Dict-backed store (tests, single process sessions)."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()
        for key, value in (initial or {}).items():
            self.put(key, value)

    def get(self, key: str) -> Any | None:
        with self._lock:
            value = self._data.get(key)
        # Round-trip through JSON so callers never share mutable state with the store
        return None if value is None else json.loads(value)

    def put(self, key: str, value: Any) -> None:
        encoded = json.dumps(value, ensure_ascii=False)
        with self._lock:
            self._data[key] = encoded

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class JsonFileMappingStore:
    """Whole-file JSON store.

    Each ``put`` / ``delete`` re-reads the file, changes one key and replaces
    the file atomically (temp file + os.replace). A missing, empty or corrupt
    file reads as an empty store.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise MappingStoreError(f"cannot read mapping store {self.path}: {e}") from e
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"mapping store {self.path} is not valid JSON, treating as empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
        except OSError as e:
            raise MappingStoreError(f"cannot write mapping store {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            Path(tmp).unlink(missing_ok=True)
            raise MappingStoreError(f"cannot write mapping store {self.path}: {e}") from e

    def get(self, key: str) -> Any | None:
        return self._read_all().get(key)

    def put(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
