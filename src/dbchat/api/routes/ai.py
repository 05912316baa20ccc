from fastapi import APIRouter, Depends, HTTPException
from typing import Annotated

from dbchat.api.dependencies import get_translator
from dbchat.api.models import ChatRequest, ChatResponse, TranslateRequest
from dbchat.llm import TranslationService
from dbchat.models import AIQueryResult

router = APIRouter()

Translator = Annotated[TranslationService, Depends(get_translator)]


@router.post("/ai", response_model=AIQueryResult)
def translate(
    payload: TranslateRequest,
    translator: Translator,
):
    missing = payload.missing_fields()
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing required parameters: {', '.join(missing)}")

    return translator.translate(
        payload.user_prompt,
        payload.db_schema,
        payload.database_type,
        payload.ai_service,
        payload.ai_model,
        connection_name=payload.connection_name,
    )


@router.post("/chat", response_model=ChatResponse)
def chat(
    payload: ChatRequest,
    translator: Translator,
):
    if not payload.ai_model or not payload.ai_service:
        raise HTTPException(status_code=400, detail="Missing required parameters: aiModel, aiService")

    reply = translator.chat(payload.messages, payload.ai_service, payload.ai_model)
    return ChatResponse(reply=reply)
