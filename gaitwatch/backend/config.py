"""
backend/config.py

Application configuration via Pydantic Settings.
All values can be overridden with environment variables or a .env file.

Quick start — create a .env file in your project root:
    DB_PATH=data/samples.db
    TIMEZONE=Europe/Berlin
    QUERY_TIMEOUT_SECONDS=10
"""

from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Storage
    DB_PATH: str = "data/samples.db"

    # Aggregation
    TIMEZONE: str = "UTC"
    """IANA zone used for day boundaries when resolving presets."""

    QUERY_TIMEOUT_SECONDS: float | None = 10.0
    """Upper bound on one sample-source request. None disables the timeout."""

    # Dashboard
    CHART_QUEUE_SIZE: int = 32

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    CORS_ORIGINS: list[str] = []
    """Browser origins allowed to call the API (JSON list in the environment). Empty disables CORS."""

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {v!r}") from exc
        return v

    @field_validator("QUERY_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("QUERY_TIMEOUT_SECONDS must be positive")
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.TIMEZONE)


settings = Settings()
