from __future__ import annotations

from datetime import datetime
import logging
from pathlib import Path
import sqlite3
from threading import Lock
from typing import List, Optional

from dbchat.models import HistoryEntry, QueryKind

from .protocol import HISTORY_LIMIT, make_display_name

logger = logging.getLogger(__name__)


class SqliteQueryLogStore:
    """SQLite-backed query log. Writes are serialized through one connection."""

    def __init__(self, path: Path, history_limit: int = HISTORY_LIMIT):
        self._path = path
        self._history_limit = history_limit
        self._lock = Lock()
        self._connection = self._connect()
        self._initialize_schema()

    def _connect(self) -> sqlite3.Connection:
        if str(self._path) != ":memory:":
            self._path.parent.mkdir(parents=True, exist_ok=True)
        connection = sqlite3.connect(str(self._path), check_same_thread=False)
        connection.execute("PRAGMA journal_mode=WAL;")
        return connection

    def _initialize_schema(self) -> None:
        cursor = self._connection.cursor()
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS query_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                kind TEXT NOT NULL,
                connection_name TEXT NOT NULL,
                display_name TEXT NOT NULL,
                full_prompt TEXT NOT NULL,
                created_at TEXT NOT NULL
            );
            """
        )
        cursor.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_query_log_connection
            ON query_log (kind, connection_name, id);
            """
        )
        self._connection.commit()

    def append(self, connection_name: str, prompt: str, kind: QueryKind = QueryKind.HISTORY) -> HistoryEntry:
        entry = HistoryEntry(
            display_name=make_display_name(connection_name, prompt),
            full_prompt=prompt,
            connection_name=connection_name,
            kind=kind,
        )
        with self._lock:
            cursor = self._connection.cursor()
            cursor.execute(
                """
                INSERT INTO query_log (kind, connection_name, display_name, full_prompt, created_at)
                VALUES (?, ?, ?, ?, ?);
                """,
                (kind.value, connection_name, entry.display_name, prompt, entry.timestamp.isoformat()),
            )
            if kind == QueryKind.HISTORY:
                cursor.execute(
                    """
                    DELETE FROM query_log
                    WHERE kind = ? AND connection_name = ? AND id NOT IN (
                        SELECT id FROM query_log
                        WHERE kind = ? AND connection_name = ?
                        ORDER BY id DESC LIMIT ?
                    );
                    """,
                    (kind.value, connection_name, kind.value, connection_name, self._history_limit),
                )
                if cursor.rowcount > 0:
                    logger.debug("Evicted %s history entries for '%s'", cursor.rowcount, connection_name)
            self._connection.commit()
        return entry

    def list(self, connection_name: str, kind: QueryKind = QueryKind.HISTORY) -> List[HistoryEntry]:
        with self._lock:
            rows = self._connection.execute(
                """
                SELECT display_name, full_prompt, connection_name, kind, created_at
                FROM query_log
                WHERE kind = ? AND connection_name = ?
                ORDER BY id DESC;
                """,
                (kind.value, connection_name),
            ).fetchall()
        return [
            HistoryEntry(
                display_name=display_name,
                full_prompt=full_prompt,
                connection_name=conn_name,
                kind=QueryKind(kind_value),
                timestamp=datetime.fromisoformat(created_at),
            )
            for display_name, full_prompt, conn_name, kind_value, created_at in rows
        ]

    def remove(self, connection_name: str, entry_name: str, kind: Optional[QueryKind] = None) -> int:
        query = "DELETE FROM query_log WHERE connection_name = ? AND display_name = ?"
        params: List[str] = [connection_name, entry_name]
        if kind is not None:
            query += " AND kind = ?"
            params.append(kind.value)
        with self._lock:
            cursor = self._connection.execute(query, params)
            self._connection.commit()
            return cursor.rowcount

    def close(self) -> None:
        with self._lock:
            self._connection.close()
