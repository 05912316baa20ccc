from typing import Optional
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env into os.environ
load_dotenv()


class Settings(BaseSettings):
    """Application configuration settings backed by environment variables."""

    openai_api_key: Optional[str] = Field(default=None, validation_alias="OPENAI_API_KEY")
    anthropic_api_key: Optional[str] = Field(default=None, validation_alias="ANTHROPIC_API_KEY")
    google_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_API_KEY", "GOOGLE_GENERATIVE_AI_API_KEY"),
        description="API key for Google generative models."
    )
    ollama_endpoint: Optional[str] = Field(
        default=None,
        validation_alias="OLLAMA_ENDPOINT",
        description="Base URL of the local Ollama server (e.g. http://localhost:11434)."
    )

    max_rows: int = Field(
        default=100,
        ge=1,
        validation_alias="MAX_ROWS",
        description="Row limit every generated query is instructed to respect."
    )

    db_connect_timeout_sec: int = Field(
        default=15,
        ge=1,
        validation_alias="DB_CONNECT_TIMEOUT_SEC",
        description="Timeout for opening a database connection."
    )
    llm_timeout_sec: float = Field(
        default=60.0,
        gt=0,
        validation_alias="LLM_TIMEOUT_SEC",
        description="Timeout for a single request to an AI provider."
    )

    history_store_backend: str = Field(
        default="memory",
        validation_alias="HISTORY_STORE_BACKEND",
        description="Query log store backend identifier: 'memory' or 'sqlite'."
    )
    history_store_path: str = Field(
        default="data/query_log.db",
        validation_alias="HISTORY_STORE_PATH",
        description="Path to the SQLite query log database."
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: str = Field(
        default="text",
        validation_alias="LOG_FORMAT",
        description="Log output format: 'text' or 'json'."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def configure_env(self, env: str) -> None:
        """Loads environment-specific variables and reloads settings."""
        if not env:
            return

        load_dotenv(f".env.{env}", override=True)
        new_settings = Settings()
        self.__dict__.update(new_settings.__dict__)


settings = Settings()

# Configure logging during import
from dbchat.common.logger import configure_logging
configure_logging(
    level=settings.log_level,
    json_format=(settings.log_format == "json")
)
