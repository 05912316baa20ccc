from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Connection, URL, make_url

from dbchat.common.logger import get_logger
from dbchat.models import DatabaseType
from .base import BaseDialectAdapter, optional_int, rows_as_pairs

logger = get_logger(__name__)

TABLES_SQL = text(
    "SELECT TABLE_SCHEMA, TABLE_NAME FROM INFORMATION_SCHEMA.TABLES "
    "WHERE TABLE_TYPE = 'BASE TABLE' "
    "ORDER BY TABLE_SCHEMA, TABLE_NAME"
)

COLUMNS_SQL = text(
    "SELECT COLUMN_NAME, DATA_TYPE FROM INFORMATION_SCHEMA.COLUMNS "
    "WHERE TABLE_SCHEMA = :table_schema AND TABLE_NAME = :table_name "
    "ORDER BY ORDINAL_POSITION"
)

DEFAULT_SCHEMA = "dbo"

# ADO.NET keyword -> URL part
_ADO_KEYS = {
    "server": "host",
    "data source": "host",
    "address": "host",
    "addr": "host",
    "network address": "host",
    "database": "database",
    "initial catalog": "database",
    "user id": "username",
    "uid": "username",
    "user": "username",
    "password": "password",
    "pwd": "password",
    "port": "port",
}


def parse_ado_connection_string(connection_string: str) -> URL:
    """
    Converts ``Server=host,1433;Database=db;User Id=sa;Password=...`` into a
    pymssql URL. Keywords without a URL counterpart (Encrypt,
    TrustServerCertificate, ...) are ignored.
    """
    parts: Dict[str, str] = {}
    for segment in connection_string.split(";"):
        if not segment.strip():
            continue
        key, sep, value = segment.partition("=")
        if not sep:
            raise ValueError(f"Malformed connection string segment: '{key.strip()}'")
        target = _ADO_KEYS.get(key.strip().lower())
        if target is None:
            logger.debug(f"Ignoring SQL Server connection keyword '{key.strip()}'")
            continue
        parts[target] = value.strip()

    host = parts.get("host")
    if not host:
        raise ValueError("SQL Server connection string has no Server")
    if host.lower().startswith("tcp:"):
        host = host[4:]

    port: Optional[str] = parts.get("port")
    if "," in host:
        host, port = (piece.strip() for piece in host.split(",", 1))

    return URL.create(
        "mssql+pymssql",
        username=parts.get("username"),
        password=parts.get("password"),
        host=host,
        port=optional_int(port),
        database=parts.get("database"),
    )


class MssqlAdapter(BaseDialectAdapter):
    database_type = DatabaseType.MSSQL
    display_name = "SQL Server"
    unknown_column_markers = ("invalid column name",)

    def build_url(self, connection_string: str) -> Tuple[URL, Dict[str, Any]]:
        conn_str = connection_string.strip()
        connect_args = {"login_timeout": self.connect_timeout}

        if "://" not in conn_str:
            return parse_ado_connection_string(conn_str), connect_args

        url = make_url(conn_str)
        if url.drivername in ("mssql", "sqlserver"):
            url = url.set(drivername="mssql+pymssql")
        return url, connect_args

    def list_tables(self, conn: Connection) -> List[Tuple[str, str]]:
        return rows_as_pairs(conn.execute(TABLES_SQL).fetchall())

    def list_columns(self, conn: Connection, table_schema: str, table_name: str) -> List[Tuple[str, str]]:
        rows = conn.execute(COLUMNS_SQL, {"table_schema": table_schema, "table_name": table_name}).fetchall()
        return rows_as_pairs(rows)

    def table_label(self, table_schema: str, table_name: str) -> str:
        if table_schema.lower() == DEFAULT_SCHEMA:
            return table_name
        return f"{table_schema}.{table_name}"
