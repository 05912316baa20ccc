from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from dbchat.common.errors import UnsupportedBackend

# Header row first, then one row per record; every cell is a string.
RowMatrix = List[List[str]]


class DatabaseType(str, Enum):
    MYSQL = "MYSQL"
    POSTGRESQL = "POSTGRESQL"
    MSSQL = "MSSQL"

    @classmethod
    def parse(cls, value: str) -> "DatabaseType":
        """Case-insensitive lookup; unknown tags raise UnsupportedBackend."""
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise UnsupportedBackend(value) from None


class ConnectionDescriptor(BaseModel):
    """A named connection. The database type is kept as given and resolved at dispatch."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    database_type: str = Field(alias="databaseType")
    connection_string: str = Field(alias="connectionString")

    def __repr_args__(self):
        # Keep credentials out of logs and tracebacks.
        yield "name", self.name
        yield "database_type", self.database_type


class TableSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    table_name: str = Field(alias="tableName")
    columns: List[str] = []


class DatabaseSchema(BaseModel):
    """Result of one introspection pass.

    ``structured`` drives rendering, ``raw`` is the text embedded into prompts.
    Both list the same tables and columns in the same order.
    """
    model_config = ConfigDict(populate_by_name=True)

    structured: List[TableSchema] = Field(
        default_factory=list,
        validation_alias=AliasChoices("structured", "schemaStructured"),
    )
    raw: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("raw", "schemaRaw"),
    )

    def raw_text(self) -> str:
        return "\n".join(self.raw)


class AIQueryResult(BaseModel):
    """The only accepted shape of a translated reply."""
    model_config = ConfigDict(extra="forbid", strict=True)

    summary: str
    query: str


class ChatRole(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    role: ChatRole
    content: str


class QueryKind(str, Enum):
    HISTORY = "history"
    FAVORITE = "favorite"


class HistoryEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field(alias="displayName")
    full_prompt: str = Field(alias="fullPrompt")
    connection_name: str = Field(alias="connectionName")
    kind: QueryKind = QueryKind.HISTORY
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
