from unittest.mock import MagicMock

import pytest

from dbchat.common.errors import (
    InvalidChatHistory,
    ProviderNotConfigured,
    TranslationParseError,
    UnsupportedProvider,
)
from dbchat.llm import ProviderConfig, ProviderRegistry, TranslationService
from dbchat.llm.providers import AnthropicProvider, OllamaProvider, OpenAIProvider
from dbchat.llm.service import CHAT_TEMPERATURE, QUERY_TEMPERATURE
from dbchat.models import ChatMessage, ChatRole, DatabaseSchema, QueryKind, TableSchema

GOOD_REPLY = '{"summary": "Lists customers.", "query": "SELECT id, email FROM customers LIMIT 25"}'


@pytest.fixture
def schema():
    return DatabaseSchema(
        structured=[TableSchema(table_name="customers", columns=["id", "email"])],
        raw=["Table: customers", "  id (int)", "  email (varchar)"],
    )


@pytest.fixture
def translator(provider_registry, history_store):
    return TranslationService(provider_registry, history_store=history_store)


def test_translate_returns_summary_and_query(chat_model_factory, translator, schema):
    chat_model_factory(OpenAIProvider, reply=GOOD_REPLY)

    result = translator.translate("who are my customers?", schema, "POSTGRESQL", "OpenAI", "gpt-4o-mini")

    assert result.summary == "Lists customers."
    assert result.query == "SELECT id, email FROM customers LIMIT 25"


def test_system_prompt_carries_schema_dialect_and_row_limit(chat_model_factory, translator, schema):
    chat_model, factory = chat_model_factory(OpenAIProvider, reply=GOOD_REPLY)

    translator.translate("who are my customers?", schema, "MSSQL", "openai", "gpt-4o-mini")

    factory.assert_called_once_with("gpt-4o-mini", QUERY_TEMPERATURE)
    system, user = chat_model.invoke.call_args.args[0]
    assert "Table: customers\n  id (int)\n  email (varchar)" in system.content
    assert "Only use Microsoft SQL Server (T-SQL) syntax" in system.content
    assert "Always limit the SQL Query to 25 rows." in system.content
    assert '{ "summary": "your-summary", "query": "your-query" }' in system.content
    assert user.content == "who are my customers?"


def test_unknown_dialect_is_passed_through(translator, schema):
    prompt = translator.build_system_prompt(schema, "SQLite")
    assert "Only use SQLite syntax" in prompt


def test_explicit_row_limit_overrides_config(provider_registry, schema):
    prompt = TranslationService(provider_registry, max_rows=10).build_system_prompt(schema, "MYSQL")
    assert "Always limit the SQL Query to 10 rows." in prompt


def test_unconfigured_provider_fails_before_client(monkeypatch, translator, schema):
    build = MagicMock()
    monkeypatch.setattr(AnthropicProvider, "build_chat_model", build)

    with pytest.raises(ProviderNotConfigured, match="ANTHROPIC_API_KEY"):
        translator.translate("q", schema, "MYSQL", "Anthropic", "claude-3-5-haiku-latest")

    build.assert_not_called()


def test_unsupported_provider(translator, schema):
    with pytest.raises(UnsupportedProvider):
        translator.translate("q", schema, "MYSQL", "Cohere", "command-r")


def test_unparseable_reply_surfaces_raw_text(chat_model_factory, translator, schema):
    chat_model_factory(OllamaProvider, reply="I think you want SELECT * FROM customers")

    with pytest.raises(TranslationParseError) as exc_info:
        translator.translate("q", schema, "MYSQL", "Ollama", "llama3")

    assert "I think you want SELECT * FROM customers" in exc_info.value.message
    assert exc_info.value.provider == "Ollama"


def test_successful_translation_is_recorded(chat_model_factory, translator, history_store, schema):
    chat_model_factory(OpenAIProvider, reply=GOOD_REPLY)

    translator.translate("who are my customers?", schema, "MYSQL", "OpenAI", "gpt-4o-mini", connection_name="shop")

    entries = history_store.list("shop", QueryKind.HISTORY)
    assert [entry.full_prompt for entry in entries] == ["who are my customers?"]


def test_failed_translation_is_not_recorded(chat_model_factory, translator, history_store, schema):
    chat_model_factory(OpenAIProvider, reply="no json")

    with pytest.raises(TranslationParseError):
        translator.translate("q", schema, "MYSQL", "OpenAI", "gpt-4o-mini", connection_name="shop")

    assert history_store.list("shop") == []


def test_history_store_failure_does_not_fail_translation(chat_model_factory, provider_registry, schema):
    store = MagicMock()
    store.append.side_effect = OSError("disk full")
    chat_model_factory(OpenAIProvider, reply=GOOD_REPLY)

    result = TranslationService(provider_registry, history_store=store).translate(
        "q", schema, "MYSQL", "OpenAI", "gpt-4o-mini", connection_name="shop"
    )

    assert result.query.startswith("SELECT")


def test_chat_relays_history_unparsed(chat_model_factory, translator):
    chat_model, factory = chat_model_factory(OllamaProvider, reply="Sure, here is a *markdown* answer.")
    history = [
        ChatMessage(role=ChatRole.SYSTEM, content="You help with SQL."),
        ChatMessage(role=ChatRole.USER, content="What is a join?"),
        ChatMessage(role=ChatRole.ASSISTANT, content="It combines rows."),
        ChatMessage(role=ChatRole.USER, content="Show an example."),
    ]

    reply = translator.chat(history, "Ollama", "llama3")

    assert reply == "Sure, here is a *markdown* answer."
    factory.assert_called_once_with("llama3", CHAT_TEMPERATURE)
    assert len(chat_model.invoke.call_args.args[0]) == 4


@pytest.mark.parametrize("history", [
    [],
    [
        ChatMessage(role=ChatRole.USER, content="hi"),
        ChatMessage(role=ChatRole.SYSTEM, content="late system"),
    ],
    [
        ChatMessage(role=ChatRole.SYSTEM, content="one"),
        ChatMessage(role=ChatRole.SYSTEM, content="two"),
    ],
])
def test_chat_rejects_invalid_history(translator, history):
    with pytest.raises(InvalidChatHistory):
        translator.chat(history, "Ollama", "llama3")


def test_openai_without_key_is_not_dispatched(monkeypatch, history_store, schema):
    build = MagicMock()
    monkeypatch.setattr(OpenAIProvider, "build_chat_model", build)
    translator = TranslationService(ProviderRegistry(ProviderConfig()), history_store=history_store)

    with pytest.raises(ProviderNotConfigured) as exc_info:
        translator.translate("q", schema, "MYSQL", "OpenAI", "gpt-4o-mini", connection_name="shop")

    assert exc_info.value.setting == "OPENAI_API_KEY"
    build.assert_not_called()
    assert history_store.list("shop") == []
