"""
Shared infrastructure for the Vigia core.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- storage: Key-value store adapters (memory, file, Supabase)
- repository: JSON persistence helpers on top of a key-value store
- clock / ids: Injectable time and identifier sources
- exceptions: Base exception classes

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .clock import IClock, SystemClock, to_epoch_ms
from .ids import IIdGenerator, UuidGenerator
from .storage import (
    IKeyValueStore,
    InMemoryKeyValueStore,
    FileKeyValueStore,
    SupabaseKeyValueStore,
    create_kv_store,
    get_kv_store,
    reset_kv_store,
)
from .exceptions import (
    VigiaError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    RateLimitError,
    StorageError,
)
from .models import CamelModel

__all__ = [
    "Settings",
    "get_settings",
    "IClock",
    "SystemClock",
    "to_epoch_ms",
    "IIdGenerator",
    "UuidGenerator",
    "IKeyValueStore",
    "InMemoryKeyValueStore",
    "FileKeyValueStore",
    "SupabaseKeyValueStore",
    "create_kv_store",
    "get_kv_store",
    "reset_kv_store",
    "VigiaError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "RateLimitError",
    "StorageError",
    "CamelModel",
]
