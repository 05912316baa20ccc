from __future__ import annotations

from typing import Dict, List, Optional, Type

from .config import ProviderConfig
from .providers import (
    AIProvider,
    AnthropicProvider,
    GoogleProvider,
    OllamaProvider,
    OpenAIProvider,
    ProviderAdapter,
)

DEFAULT_PROVIDERS: Dict[AIProvider, Type[ProviderAdapter]] = {
    AIProvider.OLLAMA: OllamaProvider,
    AIProvider.OPENAI: OpenAIProvider,
    AIProvider.ANTHROPIC: AnthropicProvider,
    AIProvider.GOOGLE: GoogleProvider,
}


class ProviderRegistry:
    """
    Resolves a provider tag to its adapter.

    Lookups never touch the network: an unknown tag raises
    ``UnsupportedProvider`` and a known but unconfigured one raises
    ``ProviderNotConfigured`` from :meth:`get_configured`.
    """

    def __init__(
        self,
        config: ProviderConfig,
        adapters: Optional[Dict[AIProvider, ProviderAdapter]] = None,
    ):
        self.config = config
        self._adapters = adapters if adapters is not None else {
            provider: adapter_cls(config) for provider, adapter_cls in DEFAULT_PROVIDERS.items()
        }

    def get(self, provider: str) -> ProviderAdapter:
        return self._adapters[AIProvider.parse(provider)]

    def get_configured(self, provider: str) -> ProviderAdapter:
        adapter = self.get(provider)
        adapter.ensure_configured()
        return adapter

    def list_providers(self) -> List[Dict[str, object]]:
        return [
            {"provider": provider.value, "configured": adapter.is_configured()}
            for provider, adapter in self._adapters.items()
        ]
