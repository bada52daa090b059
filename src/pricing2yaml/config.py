from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration loaded from environment variables or `.env`."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Core service
    app_name: str = Field(default="pricing2yaml")
    environment: Literal["local", "development", "staging", "production"] = "local"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Document reading
    file_encoding: str = Field(default="utf-8", description="Encoding used to read pricing files")
    max_document_bytes: int = Field(
        default=1024 * 1024,
        gt=0,
        description="Largest pricing document accepted by the HTTP upload endpoints",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
