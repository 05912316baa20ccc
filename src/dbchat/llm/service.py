from __future__ import annotations

from typing import List, Optional, Sequence

from dbchat.common.errors import InvalidChatHistory, TranslationParseError
from dbchat.common.logger import get_logger
from dbchat.history import QueryLogStore
from dbchat.models import AIQueryResult, ChatMessage, ChatRole, DatabaseSchema, QueryKind

from .parsing import parse_query_result
from .prompts import QUERY_SYSTEM_PROMPT, dialect_name
from .registry import ProviderRegistry

logger = get_logger(__name__)

# Structured output must survive parsing, so query generation runs cold.
QUERY_TEMPERATURE = 0.1
CHAT_TEMPERATURE = 0.7


def validate_chat_history(messages: Sequence[ChatMessage]) -> None:
    """A session is non-empty and holds at most one system message, in first position."""
    if not messages:
        raise InvalidChatHistory("No messages provided")
    system_positions = [i for i, message in enumerate(messages) if message.role == ChatRole.SYSTEM]
    if len(system_positions) > 1:
        raise InvalidChatHistory("A chat session may contain only one system message")
    if system_positions and system_positions[0] != 0:
        raise InvalidChatHistory("The system message must be the first message of the session")


class TranslationService:
    """
    Turns a natural-language prompt plus schema context into a query/summary
    pair, and relays free-form chat to the selected provider.

    Each call is independent: build prompt, dispatch once, parse. Nothing is
    retried; callers re-invoke with the same or an adjusted prompt.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        max_rows: Optional[int] = None,
        history_store: Optional[QueryLogStore] = None,
    ):
        self.registry = registry
        self.max_rows = max_rows if max_rows is not None else registry.config.max_rows
        self.history_store = history_store

    def build_system_prompt(self, schema: DatabaseSchema, database_type: str) -> str:
        return QUERY_SYSTEM_PROMPT.format(
            schema=schema.raw_text(),
            dialect=dialect_name(database_type),
            max_rows=self.max_rows,
        )

    def build_query_messages(self, prompt: str, schema: DatabaseSchema, database_type: str) -> List[ChatMessage]:
        return [
            ChatMessage(role=ChatRole.SYSTEM, content=self.build_system_prompt(schema, database_type)),
            ChatMessage(role=ChatRole.USER, content=prompt),
        ]

    def translate(
        self,
        prompt: str,
        schema: DatabaseSchema,
        database_type: str,
        provider: str,
        model: str,
        connection_name: Optional[str] = None,
    ) -> AIQueryResult:
        """Generates a query for ``prompt`` against ``schema``.

        Args:
            prompt: The user's question.
            schema: Schema whose ``raw`` lines are embedded in the system prompt.
            database_type: Backend tag used for the dialect clause.
            provider: Provider tag (Ollama, OpenAI, Anthropic, Google).
            model: Provider-specific model name.
            connection_name: When given, a successful translation is recorded
                in the query log under this connection.

        Raises:
            UnsupportedProvider, ProviderNotConfigured: before any network call.
            InvalidCredential, ProviderError: when the provider call fails.
            TranslationParseError: when the reply is not a summary/query pair.
        """
        messages = self.build_query_messages(prompt, schema, database_type)
        adapter = self.registry.get_configured(provider)

        logger.info(f"Translating prompt with {adapter} model '{model}' for {database_type}")
        raw = adapter.generate(messages, model, QUERY_TEMPERATURE)

        try:
            result = parse_query_result(raw, provider=adapter.provider.value)
        except TranslationParseError:
            logger.warning(f"{adapter} reply could not be parsed as a query")
            raise

        self._record_history(connection_name, prompt)
        return result

    def chat(self, history: Sequence[ChatMessage], provider: str, model: str) -> str:
        """Sends the whole conversation and returns the reply text unparsed."""
        validate_chat_history(history)
        adapter = self.registry.get_configured(provider)
        logger.info(f"Continuing chat of {len(history)} messages with {adapter} model '{model}'")
        return adapter.generate(history, model, CHAT_TEMPERATURE)

    def _record_history(self, connection_name: Optional[str], prompt: str) -> None:
        if self.history_store is None or not connection_name:
            return
        try:
            self.history_store.append(connection_name, prompt, QueryKind.HISTORY)
        except Exception as e:
            logger.error(f"Failed to record query history for '{connection_name}': {e}")
