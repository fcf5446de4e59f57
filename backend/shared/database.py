"""
Supabase client for the supabase storage backend.

The memory and file backends never touch this module. The key-value table
is private to the core, so the client always uses the service role key.
"""

import logging
from typing import Optional
from supabase import create_client, Client

from .config import Settings, get_settings

logger = logging.getLogger(__name__)

# Module-level client cache, keyed by (url, service role key)
_kv_clients: dict[tuple[str, str], Client] = {}


def supabase_configured(settings: Settings) -> bool:
    """Whether both the project URL and the service role key are set."""
    return bool(settings.supabase_url and settings.supabase_service_role_key)


def get_supabase_client(settings: Optional[Settings] = None) -> Client:
    """
    Get the Supabase client backing the key-value store.

    Args:
        settings: Settings to read the project URL and key from.
                  Defaults to the process settings.

    Returns:
        Client authenticated with the service role key, cached per
        URL and key so different settings get different clients

    Raises:
        RuntimeError: If SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is unset
    """
    settings = settings or get_settings()
    if not supabase_configured(settings):
        raise RuntimeError(
            "Supabase configuration missing. The supabase storage backend "
            "needs SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY."
        )

    cache_key = (settings.supabase_url, settings.supabase_service_role_key)
    client = _kv_clients.get(cache_key)
    if client is None:
        client = create_client(*cache_key)
        _kv_clients[cache_key] = client
        logger.info(f"Connected key-value store to {settings.supabase_url}")

    return client


def reset_client_cache() -> None:
    """Drop the cached clients (for testing)."""
    _kv_clients.clear()
