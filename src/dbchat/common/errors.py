from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Standardized error codes surfaced at the service boundary."""
    UNSUPPORTED_BACKEND = "UNSUPPORTED_BACKEND"
    CONNECTION_FAILURE = "CONNECTION_FAILURE"
    SCHEMA_INTROSPECTION_FAILURE = "SCHEMA_INTROSPECTION_FAILURE"
    SCHEMA_MISMATCH = "SCHEMA_MISMATCH"
    QUERY_EXECUTION_FAILURE = "QUERY_EXECUTION_FAILURE"
    UNSUPPORTED_PROVIDER = "UNSUPPORTED_PROVIDER"
    PROVIDER_NOT_CONFIGURED = "PROVIDER_NOT_CONFIGURED"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    TRANSLATION_PARSE_ERROR = "TRANSLATION_PARSE_ERROR"
    INVALID_CHAT_HISTORY = "INVALID_CHAT_HISTORY"


# Failures caused by the caller's input or configuration rather than a backend.
CLIENT_ERRORS = {
    ErrorCode.UNSUPPORTED_BACKEND,
    ErrorCode.UNSUPPORTED_PROVIDER,
    ErrorCode.PROVIDER_NOT_CONFIGURED,
    ErrorCode.INVALID_CHAT_HISTORY,
}


class DbChatError(Exception):
    """Base class for every failure the core reports to its callers."""

    error_code: ErrorCode = ErrorCode.PROVIDER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def is_client_error(self) -> bool:
        return self.error_code in CLIENT_ERRORS


# --- Database family ---

class DatabaseError(DbChatError):
    """Failure while talking to a relational backend."""

    def __init__(self, message: str, backend: Optional[str] = None):
        super().__init__(message)
        self.backend = backend


class UnsupportedBackend(DatabaseError):
    error_code = ErrorCode.UNSUPPORTED_BACKEND

    def __init__(self, database_type: str):
        super().__init__(f"Unsupported database type: {database_type}")
        self.database_type = database_type


class ConnectionFailure(DatabaseError):
    error_code = ErrorCode.CONNECTION_FAILURE


class SchemaIntrospectionFailure(DatabaseError):
    error_code = ErrorCode.SCHEMA_INTROSPECTION_FAILURE


class QueryExecutionFailure(DatabaseError):
    error_code = ErrorCode.QUERY_EXECUTION_FAILURE


class SchemaMismatch(QueryExecutionFailure):
    """The query referenced a column the database does not have."""
    error_code = ErrorCode.SCHEMA_MISMATCH


# --- AI family ---

class AIServiceError(DbChatError):
    """Failure while talking to an AI provider or interpreting its reply."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class UnsupportedProvider(AIServiceError):
    error_code = ErrorCode.UNSUPPORTED_PROVIDER

    def __init__(self, provider: str):
        super().__init__(f"AI service {provider} is not supported", provider=provider)


class ProviderNotConfigured(AIServiceError):
    error_code = ErrorCode.PROVIDER_NOT_CONFIGURED

    def __init__(self, provider: str, setting: str):
        super().__init__(
            f"{provider} is not configured. Please set {setting} in your environment or .env file.",
            provider=provider,
        )
        self.setting = setting


class InvalidCredential(AIServiceError):
    error_code = ErrorCode.INVALID_CREDENTIAL

    def __init__(self, provider: str):
        super().__init__(
            f"Invalid {provider} API key. Please check your API key configuration.",
            provider=provider,
        )


class ProviderError(AIServiceError):
    error_code = ErrorCode.PROVIDER_ERROR


class TranslationParseError(AIServiceError):
    """The provider reply could not be read as a summary/query pair."""
    error_code = ErrorCode.TRANSLATION_PARSE_ERROR

    def __init__(self, raw_response: str, provider: Optional[str] = None):
        super().__init__(
            f"Failed to parse AI response as a SQL Query. The AI response was: {raw_response}",
            provider=provider,
        )
        self.raw_response = raw_response


class InvalidChatHistory(AIServiceError):
    error_code = ErrorCode.INVALID_CHAT_HISTORY
