from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from dbchat.common.errors import (
    ConnectionFailure,
    QueryExecutionFailure,
    SchemaIntrospectionFailure,
    SchemaMismatch,
)
from dbchat.common.logger import get_logger
from dbchat.models import ConnectionDescriptor, DatabaseSchema, DatabaseType, RowMatrix, TableSchema

logger = get_logger(__name__)

SCHEMA_MISMATCH_HINT = (
    "This error typically occurs when the query references a column that doesn't exist "
    "in the database. Please check the column name against your schema."
)


def stringify_cell(value: Any) -> str:
    """Renders a native cell value for the row matrix. NULL becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def native_error_message(exc: BaseException) -> str:
    """Returns the driver's own message when SQLAlchemy wrapped it."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def safe_url(url: URL) -> str:
    return url.render_as_string(hide_password=True)


class BaseDialectAdapter(ABC):
    """
    Base class for the relational backends.

    Every public method opens its own connection, does one unit of work and
    releases the connection on every exit path. Nothing is pooled or cached
    between calls, so a single instance can serve concurrent callers.
    """

    database_type: DatabaseType
    display_name: str
    ping_sql: str = "SELECT 1"
    # Lowercase fragments of the backend's "unknown column" error text.
    unknown_column_markers: Sequence[str] = ()

    def __init__(self, connect_timeout: int = 15):
        self.connect_timeout = connect_timeout

    def __str__(self):
        return self.display_name

    @abstractmethod
    def build_url(self, connection_string: str) -> Tuple[URL, Dict[str, Any]]:
        """Turns a user-supplied connection string into a SQLAlchemy URL and driver kwargs."""

    @abstractmethod
    def list_tables(self, conn: Connection) -> List[Tuple[str, str]]:
        """Returns ``(table_schema, table_name)`` for every visible base table."""

    @abstractmethod
    def list_columns(self, conn: Connection, table_schema: str, table_name: str) -> List[Tuple[str, str]]:
        """Returns ``(column_name, data_type)`` in ordinal order."""

    def table_label(self, table_schema: str, table_name: str) -> str:
        return table_name

    @contextmanager
    def connect(self, descriptor: ConnectionDescriptor) -> Iterator[Connection]:
        """Scoped connection: the engine is disposed however the block exits."""
        try:
            url, connect_args = self.build_url(descriptor.connection_string)
            engine = create_engine(url, poolclass=NullPool, connect_args=connect_args)
        except (SQLAlchemyError, ImportError, ValueError) as e:
            logger.error(f"Invalid {self} connection string for '{descriptor.name}': {e}")
            raise ConnectionFailure(f"{self} connection failed: {e}", backend=self.display_name) from e

        logger.debug(f"Opening {self} connection '{descriptor.name}' to {safe_url(url)}")
        try:
            try:
                conn = engine.connect()
            except SQLAlchemyError as e:
                message = native_error_message(e)
                logger.error(f"{self} connection '{descriptor.name}' failed: {message}")
                raise ConnectionFailure(
                    f"{self} connection failed: {message}", backend=self.display_name
                ) from e
            try:
                yield conn
            finally:
                conn.close()
        finally:
            engine.dispose()

    def test_connection(self, descriptor: ConnectionDescriptor) -> bool:
        with self.connect(descriptor) as conn:
            try:
                conn.execute(text(self.ping_sql))
            except SQLAlchemyError as e:
                raise ConnectionFailure(
                    f"{self} connection failed: {native_error_message(e)}", backend=self.display_name
                ) from e
        logger.info(f"{self} connection '{descriptor.name}' is reachable")
        return True

    def get_schema(self, descriptor: ConnectionDescriptor) -> DatabaseSchema:
        """Lists base tables and their columns.

        ``structured`` and ``raw`` are appended to in the same loop, so they
        always describe the same tables and columns in discovery order.
        """
        structured: List[TableSchema] = []
        raw: List[str] = []

        with self.connect(descriptor) as conn:
            try:
                for table_schema, table_name in self.list_tables(conn):
                    columns = self.list_columns(conn, table_schema, table_name)
                    label = self.table_label(table_schema, table_name)

                    structured.append(TableSchema(table_name=label, columns=[name for name, _ in columns]))
                    raw.append(f"Table: {label}")
                    for column_name, data_type in columns:
                        raw.append(f"  {column_name} ({data_type})")
            except SQLAlchemyError as e:
                message = native_error_message(e)
                logger.error(f"Failed to get {self} schema for '{descriptor.name}': {message}")
                raise SchemaIntrospectionFailure(
                    f"Failed to get {self} schema: {message}", backend=self.display_name
                ) from e

        logger.info(f"Fetched {self} schema for '{descriptor.name}': {len(structured)} tables")
        return DatabaseSchema(structured=structured, raw=raw)

    def execute_query(self, descriptor: ConnectionDescriptor, query_text: str) -> RowMatrix:
        """Runs ``query_text`` exactly as given and normalizes the rows.

        The statement goes straight to the driver, so no bind-parameter
        parsing touches it.
        """
        with self.connect(descriptor) as conn:
            try:
                result = conn.exec_driver_sql(query_text)
                if not result.returns_rows:
                    conn.commit()
                    return []
                headers = [str(key) for key in result.keys()]
                rows = result.fetchall()
                conn.commit()
            except SQLAlchemyError as e:
                raise self._execution_error(descriptor, e) from e

        if not rows:
            return []

        matrix: RowMatrix = [headers]
        for row in rows:
            matrix.append([stringify_cell(value) for value in row])
        logger.info(f"{self} query on '{descriptor.name}' returned {len(rows)} rows")
        return matrix

    def is_unknown_column(self, exc: SQLAlchemyError) -> bool:
        message = native_error_message(exc).lower()
        return any(marker in message for marker in self.unknown_column_markers)

    def _execution_error(self, descriptor: ConnectionDescriptor, exc: SQLAlchemyError) -> QueryExecutionFailure:
        message = native_error_message(exc)
        logger.error(f"{self} query on '{descriptor.name}' failed: {message}")
        if self.is_unknown_column(exc):
            return SchemaMismatch(
                f"Database query failed: {message}. {SCHEMA_MISMATCH_HINT}", backend=self.display_name
            )
        return QueryExecutionFailure(f"Query execution failed: {message}", backend=self.display_name)


def rows_as_pairs(rows: Sequence[Sequence[Any]]) -> List[Tuple[str, str]]:
    return [(str(row[0]), str(row[1])) for row in rows]


def optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)
