"""Configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from DOCEDIT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DOCEDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google Docs API
    access_token: str = ""
    api_base: str = "https://docs.googleapis.com/v1/documents"
    timeout: int = 60  # seconds

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
