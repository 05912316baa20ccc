from fastapi import APIRouter, Depends, HTTPException
from typing import Annotated

from dbchat.api.dependencies import get_gateway
from dbchat.api.models import DatabaseRequest, QueryDataResponse, TestConnectionResponse
from dbchat.datasources import DatabaseGateway

router = APIRouter()

Gateway = Annotated[DatabaseGateway, Depends(get_gateway)]


@router.post("/database")
def database_operation(
    payload: DatabaseRequest,
    gateway: Gateway,
):
    if payload.connection is None:
        raise HTTPException(status_code=400, detail="Connection is required")

    if payload.action == "test":
        return TestConnectionResponse(success=gateway.test_connection(payload.connection))

    if payload.action == "schema":
        return gateway.get_schema(payload.connection).model_dump(by_alias=True)

    if payload.action == "query":
        if not payload.query:
            raise HTTPException(status_code=400, detail="Query is required")
        return QueryDataResponse(data=gateway.execute_query(payload.connection, payload.query))

    raise HTTPException(status_code=400, detail="Invalid action")
