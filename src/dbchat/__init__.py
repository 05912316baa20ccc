"""Natural-language questions against relational databases."""
from dbchat.models import (
    AIQueryResult,
    ChatMessage,
    ChatRole,
    ConnectionDescriptor,
    DatabaseSchema,
    DatabaseType,
    HistoryEntry,
    QueryKind,
    RowMatrix,
    TableSchema,
)
from dbchat.datasources import DatabaseGateway
from dbchat.llm import AIProvider, ProviderConfig, ProviderRegistry, TranslationService

__version__ = "0.1.0"

__all__ = [
    "AIQueryResult",
    "ChatMessage",
    "ChatRole",
    "ConnectionDescriptor",
    "DatabaseSchema",
    "DatabaseType",
    "HistoryEntry",
    "QueryKind",
    "RowMatrix",
    "TableSchema",
    "DatabaseGateway",
    "AIProvider",
    "ProviderConfig",
    "ProviderRegistry",
    "TranslationService",
]
