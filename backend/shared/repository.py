"""
Base repository class for key-value storage access.

Provides a common abstraction layer for all repositories, encapsulating
the key-value store and the JSON encoding of the records kept in it.
"""

import json
import logging
import threading
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .exceptions import StorageError
from .storage import IKeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for storage operations:
    - Key-value store access via self._store
    - A re-entrant lock (self._lock) for read-modify-write sequences
    - JSON load/save helpers that map stored text to Pydantic models

    Subclasses should implement domain-specific data access methods and
    hold self._lock around any sequence that reads a key and writes it back.

    Example:
        class CaseRepository(BaseRepository[Case]):
            def load_cases(self) -> list[Case]:
                return self._load_list("vigia_cases", Case)
    """

    def __init__(self, store: IKeyValueStore) -> None:
        """
        Initialize the repository with a key-value store.

        Args:
            store: Key-value store instance for persistence.
        """
        self._store = store
        self._lock = threading.RLock()

    def _read_json(self, key: str) -> Optional[Any]:
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(
                f"Stored value is not valid JSON: {e.msg}",
                key=key,
                code="CORRUPT_RECORD",
            ) from e

    def _write_json(self, key: str, value: Any) -> None:
        self._store.set(key, json.dumps(value))
        logger.debug(f"Wrote {key}")

    def _load_model(self, key: str, model: type[BaseModel]) -> Optional[Any]:
        """Load a single record, or None when the key is absent."""
        data = self._read_json(key)
        if data is None:
            return None
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise StorageError(
                f"Stored record does not match {model.__name__}",
                key=key,
                code="CORRUPT_RECORD",
                details={"errors": e.errors(include_url=False)},
            ) from e

    def _load_list(self, key: str, model: type[BaseModel]) -> list[Any]:
        """Load a list of records, or an empty list when the key is absent."""
        data = self._read_json(key)
        if data is None:
            return []
        try:
            return TypeAdapter(list[model]).validate_python(data)
        except PydanticValidationError as e:
            raise StorageError(
                f"Stored list does not match {model.__name__}",
                key=key,
                code="CORRUPT_RECORD",
                details={"errors": e.errors(include_url=False)},
            ) from e

    def _save_model(self, key: str, record: BaseModel) -> None:
        self._write_json(key, record.model_dump(mode="json", by_alias=True))

    def _save_list(self, key: str, records: list[BaseModel]) -> None:
        self._write_json(
            key,
            [r.model_dump(mode="json", by_alias=True) for r in records],
        )

    def _delete(self, key: str) -> None:
        self._store.remove(key)
        logger.debug(f"Removed {key}")
