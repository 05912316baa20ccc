from fastapi import Depends, Request

from dbchat.api.container import Container
from dbchat.datasources import DatabaseGateway
from dbchat.history import QueryLogStore
from dbchat.llm import ProviderRegistry, TranslationService


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_gateway(
    container: Container = Depends(get_container),
) -> DatabaseGateway:
    return container.gateway


def get_translator(
    container: Container = Depends(get_container),
) -> TranslationService:
    return container.translator


def get_providers(
    container: Container = Depends(get_container),
) -> ProviderRegistry:
    return container.providers


def get_history_store(
    container: Container = Depends(get_container),
) -> QueryLogStore:
    return container.history_store
