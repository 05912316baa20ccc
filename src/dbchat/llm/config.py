from typing import Optional
from pydantic import BaseModel, Field, SecretStr, field_validator


class ProviderConfig(BaseModel):
    """Credentials and endpoints for every AI provider, plus the global row bound."""
    openai_api_key: Optional[SecretStr] = None
    anthropic_api_key: Optional[SecretStr] = None
    google_api_key: Optional[SecretStr] = None
    ollama_endpoint: Optional[str] = None
    max_rows: int = Field(100, ge=1, description="Row limit requested in every generated query")
    timeout_sec: float = Field(60.0, gt=0, description="Per-request timeout for provider calls")

    @field_validator("openai_api_key", "anthropic_api_key", "google_api_key", "ollama_endpoint", mode="before")
    @classmethod
    def _blank_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_settings(cls, settings) -> "ProviderConfig":
        return cls(
            openai_api_key=settings.openai_api_key,
            anthropic_api_key=settings.anthropic_api_key,
            google_api_key=settings.google_api_key,
            ollama_endpoint=settings.ollama_endpoint,
            max_rows=settings.max_rows,
            timeout_sec=settings.llm_timeout_sec,
        )
