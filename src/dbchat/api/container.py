from typing import Optional

from dbchat.common.settings import Settings, settings as default_settings
from dbchat.datasources import DatabaseGateway
from dbchat.history import QueryLogStore, create_query_log_store
from dbchat.llm import ProviderConfig, ProviderRegistry, TranslationService


class Container:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        gateway: Optional[DatabaseGateway] = None,
        providers: Optional[ProviderRegistry] = None,
        history_store: Optional[QueryLogStore] = None,
    ):
        self.settings = settings or default_settings
        self.gateway = gateway or DatabaseGateway.from_settings(self.settings)
        self.providers = providers or ProviderRegistry(ProviderConfig.from_settings(self.settings))
        self.history_store = history_store or create_query_log_store(self.settings)
        self.translator = TranslationService(self.providers, history_store=self.history_store)

    def close(self) -> None:
        close = getattr(self.history_store, "close", None)
        if callable(close):
            close()
