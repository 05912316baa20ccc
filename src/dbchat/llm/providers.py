"""
Provider adapters: one LangChain chat model per AI backend behind a single
``generate(messages, model, temperature) -> str`` call.

Clients are built per call from the current configuration, with SDK retries
disabled and a request timeout, so a failing provider surfaces promptly.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_anthropic import ChatAnthropic
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI

from dbchat.common.errors import InvalidCredential, ProviderError, ProviderNotConfigured, UnsupportedProvider
from dbchat.common.logger import get_logger
from dbchat.models import ChatMessage, ChatRole
from .config import ProviderConfig

logger = get_logger(__name__)

AUTH_ERROR_MARKERS = (
    "unauthorized",
    "invalid api key",
    "incorrect api key",
    "invalid x-api-key",
    "api key not valid",
    "authentication_error",
)


class AIProvider(str, Enum):
    OLLAMA = "Ollama"
    OPENAI = "OpenAI"
    ANTHROPIC = "Anthropic"
    GOOGLE = "Google"

    @classmethod
    def parse(cls, value: str) -> "AIProvider":
        """Case-insensitive lookup; unknown tags raise UnsupportedProvider."""
        wanted = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise UnsupportedProvider(value)


def to_langchain_messages(messages: Sequence[ChatMessage]) -> List[BaseMessage]:
    converted: List[BaseMessage] = []
    for message in messages:
        if message.role == ChatRole.SYSTEM:
            converted.append(SystemMessage(content=message.content))
        elif message.role == ChatRole.ASSISTANT:
            converted.append(AIMessage(content=message.content))
        else:
            converted.append(HumanMessage(content=message.content))
    return converted


def message_text(response: Any) -> str:
    """Flattens a chat model reply to plain text.

    Some providers return a list of content blocks instead of a string.
    """
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content)


def is_auth_error(exc: BaseException) -> bool:
    statuses = (
        getattr(exc, "status_code", None),
        getattr(exc, "code", None),
        getattr(getattr(exc, "response", None), "status_code", None),
    )
    if any(status in (401, "401") for status in statuses):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in AUTH_ERROR_MARKERS)


class ProviderAdapter(ABC):
    """Maps the uniform generate call onto one provider's client."""

    provider: AIProvider
    # Name of the setting that must be present before this adapter is used.
    required_setting: str

    def __init__(self, config: ProviderConfig):
        self.config = config

    def __str__(self):
        return self.provider.value

    @abstractmethod
    def is_configured(self) -> bool:
        ...

    @abstractmethod
    def build_chat_model(self, model: str, temperature: float) -> BaseChatModel:
        ...

    def ensure_configured(self) -> None:
        if not self.is_configured():
            raise ProviderNotConfigured(self.provider.value, self.required_setting)

    def generate(self, messages: Sequence[ChatMessage], model: str, temperature: float) -> str:
        self.ensure_configured()
        try:
            chat_model = self.build_chat_model(model, temperature)
            response = chat_model.invoke(to_langchain_messages(messages))
        except Exception as e:
            if is_auth_error(e):
                logger.error(f"{self} rejected the configured credential")
                raise InvalidCredential(self.provider.value) from e
            logger.error(f"{self} request failed: {type(e).__name__}: {e}")
            raise ProviderError(f"{self} service error: {e}", provider=self.provider.value) from e

        text = message_text(response)
        logger.debug(f"{self} model '{model}' replied with {len(text)} characters")
        return text

    @staticmethod
    def _secret(value) -> Optional[str]:
        return value.get_secret_value() if value is not None else None


class OllamaProvider(ProviderAdapter):
    provider = AIProvider.OLLAMA
    required_setting = "OLLAMA_ENDPOINT"

    def is_configured(self) -> bool:
        return bool(self.config.ollama_endpoint)

    def build_chat_model(self, model: str, temperature: float) -> BaseChatModel:
        return ChatOllama(
            model=model,
            base_url=self.config.ollama_endpoint,
            temperature=temperature,
            client_kwargs={"timeout": self.config.timeout_sec},
        )


class OpenAIProvider(ProviderAdapter):
    provider = AIProvider.OPENAI
    required_setting = "OPENAI_API_KEY"

    def is_configured(self) -> bool:
        return self.config.openai_api_key is not None

    def build_chat_model(self, model: str, temperature: float) -> BaseChatModel:
        return ChatOpenAI(
            model=model,
            api_key=self._secret(self.config.openai_api_key),
            temperature=temperature,
            timeout=self.config.timeout_sec,
            max_retries=0,
        )


class AnthropicProvider(ProviderAdapter):
    provider = AIProvider.ANTHROPIC
    required_setting = "ANTHROPIC_API_KEY"

    def is_configured(self) -> bool:
        return self.config.anthropic_api_key is not None

    def build_chat_model(self, model: str, temperature: float) -> BaseChatModel:
        return ChatAnthropic(
            model=model,
            api_key=self._secret(self.config.anthropic_api_key),
            temperature=temperature,
            max_tokens=4096,
            timeout=self.config.timeout_sec,
            max_retries=0,
        )


class GoogleProvider(ProviderAdapter):
    provider = AIProvider.GOOGLE
    required_setting = "GOOGLE_API_KEY"

    def is_configured(self) -> bool:
        return self.config.google_api_key is not None

    def build_chat_model(self, model: str, temperature: float) -> BaseChatModel:
        return ChatGoogleGenerativeAI(
            model=model,
            google_api_key=self._secret(self.config.google_api_key),
            temperature=temperature,
            timeout=self.config.timeout_sec,
            max_retries=0,
        )
