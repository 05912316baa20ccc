from __future__ import annotations

import json
import re
from typing import Any, Optional

from pydantic import ValidationError

from dbchat.common.errors import TranslationParseError
from dbchat.models import AIQueryResult

_FENCE_RE = re.compile(r"```[a-zA-Z]*")
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def sanitize_response(text: str) -> str:
    """
    Remove markdown code fences and line breaks from a model reply.
    """
    cleaned = _FENCE_RE.sub("", text)
    cleaned = cleaned.replace("\r", " ").replace("\n", " ")
    return cleaned.strip()


def extract_json_object(text: str) -> Optional[Any]:
    """
    Parse ``text`` as JSON, falling back to the outermost {...} block when the
    object is wrapped in prose. Returns None when neither parses.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    match = _OBJECT_RE.search(text)
    if match:
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
    return None


def parse_query_result(raw: str, provider: Optional[str] = None) -> AIQueryResult:
    """Reads a provider reply as exactly ``{"summary": str, "query": str}``.

    Raises:
        TranslationParseError: carrying ``raw`` untouched, for any malformed,
            incomplete or over-complete reply.
    """
    candidate = extract_json_object(sanitize_response(raw))
    if not isinstance(candidate, dict):
        raise TranslationParseError(raw, provider=provider)
    try:
        return AIQueryResult.model_validate(candidate)
    except ValidationError as e:
        raise TranslationParseError(raw, provider=provider) from e
