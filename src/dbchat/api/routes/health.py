from fastapi import APIRouter, Depends
from typing import Annotated, Any, Dict

from dbchat.api.dependencies import get_gateway, get_providers
from dbchat.datasources import DatabaseGateway
from dbchat.llm import ProviderRegistry

router = APIRouter()


@router.get("/health", response_model=Dict[str, Any])
def health(
    gateway: Annotated[DatabaseGateway, Depends(get_gateway)],
    providers: Annotated[ProviderRegistry, Depends(get_providers)],
):
    return {
        "status": "ok",
        "databases": gateway.supported_types(),
        "providers": providers.list_providers(),
    }
