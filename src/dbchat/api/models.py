from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from dbchat.models import ChatMessage, ConnectionDescriptor, DatabaseSchema, QueryKind, RowMatrix


class TranslateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ai_model: Optional[str] = Field(None, alias="aiModel")
    ai_service: Optional[str] = Field(None, alias="aiService")
    user_prompt: Optional[str] = Field(None, alias="userPrompt")
    db_schema: Optional[DatabaseSchema] = Field(None, alias="dbSchema")
    database_type: Optional[str] = Field(None, alias="databaseType")
    connection_name: Optional[str] = Field(None, alias="connectionName")

    def missing_fields(self) -> List[str]:
        required = {
            "aiModel": self.ai_model,
            "aiService": self.ai_service,
            "userPrompt": self.user_prompt,
            "dbSchema": self.db_schema,
            "databaseType": self.database_type,
        }
        return [name for name, value in required.items() if not value]


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ai_model: Optional[str] = Field(None, alias="aiModel")
    ai_service: Optional[str] = Field(None, alias="aiService")
    messages: List[ChatMessage] = []


class ChatResponse(BaseModel):
    reply: str


class DatabaseRequest(BaseModel):
    connection: Optional[ConnectionDescriptor] = None
    action: Optional[str] = None
    query: Optional[str] = None


class TestConnectionResponse(BaseModel):
    success: bool


class QueryDataResponse(BaseModel):
    data: RowMatrix


class HistoryAppendRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    connection_name: str = Field(alias="connectionName")
    prompt: str
    kind: QueryKind = QueryKind.HISTORY


class HistoryDeleteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    connection_name: str = Field(alias="connectionName")
    name: str
    kind: Optional[QueryKind] = None


class HistoryDeleteResponse(BaseModel):
    removed: int


class ErrorResponse(BaseModel):
    error: str
