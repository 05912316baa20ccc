from __future__ import annotations

import logging
from threading import RLock
from typing import Dict, List, Optional

from dbchat.models import HistoryEntry, QueryKind

from .protocol import HISTORY_LIMIT, make_display_name

logger = logging.getLogger(__name__)


class InMemoryQueryLogStore:
    """Process-local query log. Entries are kept newest first per kind."""

    def __init__(self, history_limit: int = HISTORY_LIMIT):
        self._history_limit = history_limit
        self._entries: Dict[QueryKind, List[HistoryEntry]] = {kind: [] for kind in QueryKind}
        self._lock = RLock()

    def append(self, connection_name: str, prompt: str, kind: QueryKind = QueryKind.HISTORY) -> HistoryEntry:
        entry = HistoryEntry(
            display_name=make_display_name(connection_name, prompt),
            full_prompt=prompt,
            connection_name=connection_name,
            kind=kind,
        )
        with self._lock:
            entries = self._entries[kind]
            entries.insert(0, entry)
            if kind == QueryKind.HISTORY:
                self._evict(entries, connection_name)
        return entry

    def _evict(self, entries: List[HistoryEntry], connection_name: str) -> None:
        # Newest first, so everything past the limit for this connection is the oldest.
        owned = [i for i, entry in enumerate(entries) if entry.connection_name == connection_name]
        stale = owned[self._history_limit:]
        for i in reversed(stale):
            del entries[i]
        if stale:
            logger.debug("Evicted %s history entries for '%s'", len(stale), connection_name)

    def list(self, connection_name: str, kind: QueryKind = QueryKind.HISTORY) -> List[HistoryEntry]:
        with self._lock:
            return [entry for entry in self._entries[kind] if entry.connection_name == connection_name]

    def remove(self, connection_name: str, entry_name: str, kind: Optional[QueryKind] = None) -> int:
        kinds = [kind] if kind is not None else list(QueryKind)
        removed = 0
        with self._lock:
            for k in kinds:
                before = len(self._entries[k])
                self._entries[k] = [
                    entry for entry in self._entries[k]
                    if not (entry.connection_name == connection_name and entry.display_name == entry_name)
                ]
                removed += before - len(self._entries[k])
        return removed
