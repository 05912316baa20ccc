from .config import ProviderConfig
from .providers import (
    AIProvider,
    ProviderAdapter,
    OllamaProvider,
    OpenAIProvider,
    AnthropicProvider,
    GoogleProvider,
)
from .registry import ProviderRegistry
from .parsing import sanitize_response, parse_query_result
from .service import TranslationService, validate_chat_history, QUERY_TEMPERATURE, CHAT_TEMPERATURE

__all__ = [
    "ProviderConfig",
    "AIProvider",
    "ProviderAdapter",
    "OllamaProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "GoogleProvider",
    "ProviderRegistry",
    "sanitize_response",
    "parse_query_result",
    "TranslationService",
    "validate_chat_history",
    "QUERY_TEMPERATURE",
    "CHAT_TEMPERATURE",
]
