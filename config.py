"""
Typed settings for the Sideline backend.

Uses Pydantic Settings to load configuration from environment variables
(and an optional .env file next to this module) with validation.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sources.sheets_client import DEFAULT_SHEET_RANGE, DEFAULT_TIMEOUT_SECONDS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parent / ".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )

    spreadsheet_id: str | None = Field(None, alias="GOOGLE_SHEETS_SPREADSHEET_ID")
    sheets_api_key: str | None = Field(None, alias="GOOGLE_SHEETS_API_KEY")
    sheets_range: str = Field(DEFAULT_SHEET_RANGE, alias="SHEETS_RANGE")
    sheets_timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, alias="SHEETS_TIMEOUT_SECONDS")

    database_url: str = Field("sqlite:///sideline.db", alias="DATABASE_URL")

    environment: str = Field("development", alias="ENVIRONMENT")
    log_level: str | None = Field(None, alias="LOG_LEVEL")
    cors_origin: str = Field("*", alias="CORS_ORIGIN")

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_async_to_sync(cls, v: str) -> str:
        """The store is read synchronously; asyncpg URLs are rewritten to psycopg."""
        if isinstance(v, str) and "asyncpg" in v:
            return v.replace("asyncpg", "psycopg")
        return v

    @field_validator("sheets_timeout_seconds")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("SHEETS_TIMEOUT_SECONDS must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
