"""
Key-value storage port and local adapters.

The record store persists each collection as one text blob under a fixed key,
the way a browser keeps data in local storage. Anything implementing
`KeyValueStorage` can back the store:

- InMemoryStorage: process-local dict (tests, throwaway runs)
- JsonFileStorage: a single JSON object file mapping key -> text
- SupabaseStorage: a Supabase table (see repositories/supabase_storage.py)

A missing key loads as None; callers treat that as an empty collection.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from config.settings import Settings

logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    """Raised when a storage backend cannot read or write a value."""
    pass


@runtime_checkable
class KeyValueStorage(Protocol):
    def load(self, key: str) -> Optional[str]:
        ...

    def save(self, key: str, value: str) -> None:
        ...


class InMemoryStorage:
    """Dict-backed storage. Contents live as long as the instance."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def save(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileStorage:
    """
    Storage kept in one JSON object file.

    Every save rewrites the whole file through a temporary file in the same
    directory followed by os.replace, so a crash mid-write leaves the previous
    contents intact. A missing file reads as empty; an unreadable or corrupt
    file is logged and also read as empty.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s: expected a JSON object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def load(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def save(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        json.dump(data, f, ensure_ascii=False, indent=2)
                    os.replace(tmp_name, self.path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
            except OSError as e:
                raise PersistenceError(f"Failed to write {self.path}: {e}") from e


def build_storage(settings: Settings) -> KeyValueStorage:
    """
    Create the storage adapter selected by settings.storage_backend.

    The Supabase adapter is imported lazily so local backends work without
    Supabase credentials.
    """

    if settings.storage_backend == "memory":
        return InMemoryStorage()
    if settings.storage_backend == "supabase":
        from repositories.client import create_supabase_client
        from repositories.supabase_storage import SupabaseStorage

        client = create_supabase_client(settings.supabase_url, settings.supabase_key)
        return SupabaseStorage(client, table=settings.supabase_table)
    return JsonFileStorage(settings.data_file)


__all__ = [
    "PersistenceError",
    "KeyValueStorage",
    "InMemoryStorage",
    "JsonFileStorage",
    "build_storage",
]
