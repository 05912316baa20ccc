from pathlib import Path

from .protocol import QueryLogStore, HISTORY_LIMIT, make_display_name
from .in_memory_store import InMemoryQueryLogStore
from .sqlite_store import SqliteQueryLogStore


def create_query_log_store(settings) -> QueryLogStore:
    """Builds the store selected by ``HISTORY_STORE_BACKEND``."""
    backend = settings.history_store_backend.lower()
    if backend == "memory":
        return InMemoryQueryLogStore()
    if backend == "sqlite":
        return SqliteQueryLogStore(Path(settings.history_store_path))
    raise ValueError(f"Unknown history store backend: '{settings.history_store_backend}'")


__all__ = [
    "QueryLogStore",
    "InMemoryQueryLogStore",
    "SqliteQueryLogStore",
    "create_query_log_store",
    "make_display_name",
    "HISTORY_LIMIT",
]
