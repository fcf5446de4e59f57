"""
Persistent key-value store adapters.

The core persists every record as JSON text under a string key. Three
backends implement IKeyValueStore:
- InMemoryKeyValueStore: a dict, for tests and throwaway runs
- FileKeyValueStore: one file per key on local disk (default)
- SupabaseKeyValueStore: rows of a key/value table in Supabase

None of them offers transactions across keys.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable
from urllib.parse import quote

from supabase import Client

from .config import get_settings
from .database import get_supabase_client

logger = logging.getLogger(__name__)


@runtime_checkable
class IKeyValueStore(Protocol):
    """
    Interface for durable string storage.

    Reads of missing keys return None; removing a missing key is a no-op.
    """

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Delete the value stored under key, if any."""
        ...


class InMemoryKeyValueStore:
    """Key-value store held in process memory. Not durable."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        """List stored keys (test helper)."""
        return list(self._data)


class FileKeyValueStore:
    """
    Key-value store backed by a directory on local disk.

    Each key maps to one file whose name is the percent-encoded key, so
    keys such as ``reset_token_ana@example.com`` stay filesystem safe.
    Writes are atomic: the value goes to a temp file in the same directory
    and is then renamed over the target.
    """

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        return self._directory / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=".tmp-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)


class SupabaseKeyValueStore:
    """
    Key-value store backed by a Supabase table.

    The table needs a unique text column ``key`` and a text column
    ``value``. Upserts resolve on ``key``.
    """

    def __init__(self, db: Client, table: str = "kv_store"):
        self._db = db
        self._table = table

    def get(self, key: str) -> Optional[str]:
        result = (
            self._db.table(self._table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return result.data[0]["value"]

    def set(self, key: str, value: str) -> None:
        self._db.table(self._table).upsert(
            {"key": key, "value": value},
            on_conflict="key",
        ).execute()

    def remove(self, key: str) -> None:
        self._db.table(self._table).delete().eq("key", key).execute()


# Module-level store cache
_store_instance: Optional[IKeyValueStore] = None


def create_kv_store(backend: Optional[str] = None) -> IKeyValueStore:
    """
    Build a key-value store for the given backend name.

    Args:
        backend: "memory", "file" or "supabase". Defaults to the
                 STORAGE_BACKEND setting.

    Returns:
        A new store instance

    Raises:
        ValueError: If the backend name is unknown
    """
    settings = get_settings()
    backend = backend or settings.storage_backend

    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "file":
        return FileKeyValueStore(settings.storage_path)
    if backend == "supabase":
        return SupabaseKeyValueStore(get_supabase_client(settings), settings.supabase_kv_table)

    raise ValueError(f"Unknown storage backend: {backend}")


def get_kv_store() -> IKeyValueStore:
    """Get the process-wide key-value store."""
    global _store_instance
    if _store_instance is None:
        _store_instance = create_kv_store()
        logger.debug(f"Created {type(_store_instance).__name__}")
    return _store_instance


def reset_kv_store() -> None:
    """Reset the key-value store singleton (for testing)."""
    global _store_instance
    _store_instance = None
