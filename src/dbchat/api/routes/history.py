from fastapi import APIRouter, Depends, Query
from typing import Annotated, List

from dbchat.api.dependencies import get_history_store
from dbchat.api.models import HistoryAppendRequest, HistoryDeleteRequest, HistoryDeleteResponse
from dbchat.history import QueryLogStore
from dbchat.models import HistoryEntry, QueryKind

router = APIRouter()

Store = Annotated[QueryLogStore, Depends(get_history_store)]


@router.get("/history", response_model=List[HistoryEntry])
def list_history(
    store: Store,
    connection_name: Annotated[str, Query(alias="connectionName")],
    kind: QueryKind = QueryKind.HISTORY,
):
    return store.list(connection_name, kind)


@router.post("/history", response_model=HistoryEntry)
def append_history(
    payload: HistoryAppendRequest,
    store: Store,
):
    return store.append(payload.connection_name, payload.prompt, payload.kind)


@router.delete("/history", response_model=HistoryDeleteResponse)
def remove_history(
    payload: HistoryDeleteRequest,
    store: Store,
):
    removed = store.remove(payload.connection_name, payload.name, payload.kind)
    return HistoryDeleteResponse(removed=removed)
