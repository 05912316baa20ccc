from typing import Any, Dict, List, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Connection, URL, make_url

from dbchat.models import DatabaseType
from .base import BaseDialectAdapter, rows_as_pairs

TABLES_SQL = text(
    "SELECT TABLE_SCHEMA, TABLE_NAME FROM INFORMATION_SCHEMA.TABLES "
    "WHERE TABLE_SCHEMA = DATABASE() AND TABLE_TYPE = 'BASE TABLE' "
    "ORDER BY TABLE_NAME"
)

COLUMNS_SQL = text(
    "SELECT COLUMN_NAME, DATA_TYPE FROM INFORMATION_SCHEMA.COLUMNS "
    "WHERE TABLE_SCHEMA = :table_schema AND TABLE_NAME = :table_name "
    "ORDER BY ORDINAL_POSITION"
)


class MysqlAdapter(BaseDialectAdapter):
    database_type = DatabaseType.MYSQL
    display_name = "MySQL"
    unknown_column_markers = ("unknown column",)

    def build_url(self, connection_string: str) -> Tuple[URL, Dict[str, Any]]:
        url = make_url(connection_string.strip())
        if url.drivername in ("mysql", "mariadb"):
            url = url.set(drivername=f"{url.drivername}+pymysql")
        return url, {"connect_timeout": self.connect_timeout}

    def list_tables(self, conn: Connection) -> List[Tuple[str, str]]:
        return rows_as_pairs(conn.execute(TABLES_SQL).fetchall())

    def list_columns(self, conn: Connection, table_schema: str, table_name: str) -> List[Tuple[str, str]]:
        rows = conn.execute(COLUMNS_SQL, {"table_schema": table_schema, "table_name": table_name}).fetchall()
        return rows_as_pairs(rows)
