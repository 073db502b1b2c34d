"""
Store factory.

Picks the key-value store for story documents from Settings. The local
file store is the default so the editor runs without a Supabase project;
identity always needs one.
"""

import logging
from typing import Optional

from storyloom.config import Settings
from storyloom.storage.file_store import FileKeyValueStore
from storyloom.storage.protocol import KeyValueStore
from storyloom.storage.supabase_store import SupabaseIdentity, SupabaseKeyValueStore

logger = logging.getLogger(__name__)

BACKENDS = ("file", "supabase")


def create_kv_store(settings: Settings, root=None) -> KeyValueStore:
    """
    Create the story document store.

    Args:
        settings: resolved settings; `storage_backend` selects the store
        root: directory for the file store (defaults to db/kv/)
    """
    backend = settings.storage_backend
    if backend not in BACKENDS:
        raise ValueError(f"Unknown storage backend '{backend}', expected one of {', '.join(BACKENDS)}")

    if backend == "supabase":
        logger.info(f"Using Supabase key-value store (table {settings.kv_table})")
        return SupabaseKeyValueStore(
            url=settings.supabase_url,
            key=settings.supabase_service_role_key,
            table=settings.kv_table,
        )

    store = FileKeyValueStore(root)
    logger.info(f"Using file key-value store at {store.root}")
    return store


def create_identity(settings: Settings) -> Optional[SupabaseIdentity]:
    """Server-side identity, or None when Supabase is not configured."""
    if not settings.supabase_url or not settings.supabase_service_role_key:
        logger.warning("Supabase identity not configured; story routes will reject every request")
        return None
    return SupabaseIdentity(settings.supabase_url, settings.supabase_service_role_key)
