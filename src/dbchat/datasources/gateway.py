from __future__ import annotations

from typing import Dict, Optional

from dbchat.common.errors import UnsupportedBackend
from dbchat.common.logger import get_logger
from dbchat.models import ConnectionDescriptor, DatabaseSchema, DatabaseType, RowMatrix

from .base import BaseDialectAdapter
from .mssql import MssqlAdapter
from .mysql import MysqlAdapter
from .postgres import PostgresAdapter

logger = get_logger(__name__)


def default_adapters(connect_timeout: int = 15) -> Dict[DatabaseType, BaseDialectAdapter]:
    return {
        DatabaseType.MYSQL: MysqlAdapter(connect_timeout=connect_timeout),
        DatabaseType.POSTGRESQL: PostgresAdapter(connect_timeout=connect_timeout),
        DatabaseType.MSSQL: MssqlAdapter(connect_timeout=connect_timeout),
    }


class DatabaseGateway:
    """
    Routes each request to the adapter registered for the connection's
    database type.

    The tag is resolved before any I/O, so an unknown type fails fast with
    ``UnsupportedBackend``. Adapters are stateless and shared by all callers.
    """

    def __init__(self, adapters: Optional[Dict[DatabaseType, BaseDialectAdapter]] = None):
        self._adapters = adapters if adapters is not None else default_adapters()

    @classmethod
    def from_settings(cls, settings) -> "DatabaseGateway":
        return cls(default_adapters(connect_timeout=settings.db_connect_timeout_sec))

    def get_adapter(self, database_type: str) -> BaseDialectAdapter:
        db_type = DatabaseType.parse(database_type)
        adapter = self._adapters.get(db_type)
        if adapter is None:
            raise UnsupportedBackend(database_type)
        return adapter

    def supported_types(self) -> list[str]:
        return [db_type.value for db_type in self._adapters]

    def test_connection(self, connection: ConnectionDescriptor) -> bool:
        return self.get_adapter(connection.database_type).test_connection(connection)

    def get_schema(self, connection: ConnectionDescriptor) -> DatabaseSchema:
        return self.get_adapter(connection.database_type).get_schema(connection)

    def execute_query(self, connection: ConnectionDescriptor, query: str) -> RowMatrix:
        adapter = self.get_adapter(connection.database_type)
        logger.debug(f"Executing query on '{connection.name}' via {adapter}")
        return adapter.execute_query(connection, query)
