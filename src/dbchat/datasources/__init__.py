from .base import BaseDialectAdapter, stringify_cell
from .mysql import MysqlAdapter
from .postgres import PostgresAdapter
from .mssql import MssqlAdapter
from .gateway import DatabaseGateway, default_adapters

__all__ = [
    "BaseDialectAdapter",
    "MysqlAdapter",
    "PostgresAdapter",
    "MssqlAdapter",
    "DatabaseGateway",
    "default_adapters",
    "stringify_cell",
]
