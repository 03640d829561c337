"""Data access layer."""

from __future__ import annotations

import logging

from ..config import STORAGE_BACKENDS, AppSettings
from .base import DEFAULT_UPCOMING_LIMIT, CalendarStores, EventStore, NoteStore, ProfileStore
from .json_store import json_stores
from .memory import memory_stores
from .seed import seed_demo_data
from .supabase import SupabaseGateway, SupabaseNotInitializedError, supabase_stores

logger = logging.getLogger(__name__)


def open_store(settings: AppSettings) -> CalendarStores:
    """Build the stores for the configured backend."""

    backend = settings.storage.backend
    if backend not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown storage backend '{backend}'. Expected one of: {', '.join(STORAGE_BACKENDS)}")
    logger.info("Opening %s calendar store", backend)
    if backend == "json":
        return json_stores(settings.storage.json_file)
    if backend == "supabase":
        return supabase_stores(settings.supabase, settings.storage)
    return memory_stores()


__all__ = [
    "DEFAULT_UPCOMING_LIMIT",
    "CalendarStores",
    "EventStore",
    "NoteStore",
    "ProfileStore",
    "SupabaseGateway",
    "SupabaseNotInitializedError",
    "json_stores",
    "memory_stores",
    "open_store",
    "seed_demo_data",
    "supabase_stores",
]
