"""
Centralized configuration for the Vigia core.

All settings are loaded from environment variables with sensible defaults.
Backend-specific settings are namespaced (e.g., SUPABASE_*, STORAGE_*).
"""

from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Vigia"
    app_version: str = "0.1.0"
    debug: bool = False

    # Key-value storage
    storage_backend: Literal["memory", "file", "supabase"] = "file"
    storage_path: str = ".vigia"

    # Supabase (only used by the supabase storage backend)
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_kv_table: str = "kv_store"

    # Rate limiting
    rate_limit_max_attempts: int = 5
    rate_limit_window_ms: int = 60_000

    # Auth
    session_ttl_ms: int = 3_600_000  # 1 hour
    reset_token_ttl_ms: int = 3_600_000  # 1 hour
    min_password_length: int = 6


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
