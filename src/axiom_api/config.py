"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "aXiom API"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    request_log_file: str | None = None

    # Database (MongoDB)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "axiom"
    feedback_collection: str = "feedbacks"
    cats_collection: str = "cats"
    mongodb_max_pool_size: int = 10
    mongodb_min_pool_size: int = 2
    mongodb_max_idle_time_ms: int = 30000

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Feedback analysis (OpenAI)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    analysis_max_tokens: int = 1024

    # Dashboard client
    dashboard_api_base_url: str = "http://localhost:8000/api"
    dashboard_filter_storage_path: str = "~/.axiom/feedback_filters.json"
    dashboard_page_size: int = 20

    @field_validator("mongodb_uri")
    @classmethod
    def validate_mongodb_uri(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("MONGODB_URI must start with mongodb:// or mongodb+srv://")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
