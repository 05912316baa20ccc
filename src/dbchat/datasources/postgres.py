from typing import Any, Dict, List, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Connection, URL, make_url
from sqlalchemy.exc import SQLAlchemyError

from dbchat.models import DatabaseType
from .base import BaseDialectAdapter, rows_as_pairs

TABLES_SQL = text(
    "SELECT table_schema, table_name FROM information_schema.tables "
    "WHERE table_schema = 'public' AND table_type = 'BASE TABLE' "
    "ORDER BY table_name"
)

COLUMNS_SQL = text(
    "SELECT column_name, data_type FROM information_schema.columns "
    "WHERE table_schema = :table_schema AND table_name = :table_name "
    "ORDER BY ordinal_position"
)

UNDEFINED_COLUMN = "42703"


class PostgresAdapter(BaseDialectAdapter):
    database_type = DatabaseType.POSTGRESQL
    display_name = "PostgreSQL"

    def build_url(self, connection_string: str) -> Tuple[URL, Dict[str, Any]]:
        """
        Accepts ``postgres://`` / ``postgresql://`` URLs and libpq
        ``host=... dbname=...`` strings. The latter are handed to psycopg2 as-is.
        """
        conn_str = connection_string.strip()
        connect_args: Dict[str, Any] = {"connect_timeout": self.connect_timeout}

        if "://" not in conn_str:
            connect_args["dsn"] = conn_str
            return make_url("postgresql+psycopg2://"), connect_args

        url = make_url(conn_str)
        if url.drivername in ("postgres", "postgresql"):
            url = url.set(drivername="postgresql+psycopg2")
        return url, connect_args

    def list_tables(self, conn: Connection) -> List[Tuple[str, str]]:
        return rows_as_pairs(conn.execute(TABLES_SQL).fetchall())

    def list_columns(self, conn: Connection, table_schema: str, table_name: str) -> List[Tuple[str, str]]:
        rows = conn.execute(COLUMNS_SQL, {"table_schema": table_schema, "table_name": table_name}).fetchall()
        return rows_as_pairs(rows)

    def is_unknown_column(self, exc: SQLAlchemyError) -> bool:
        if getattr(getattr(exc, "orig", None), "pgcode", None) == UNDEFINED_COLUMN:
            return True
        message = str(getattr(exc, "orig", exc)).lower()
        return "column" in message and "does not exist" in message
