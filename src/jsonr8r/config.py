"""Client configuration and environment loading utilities (Pydantic v2)."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env if present (non-fatal if missing)
load_dotenv(dotenv_path=Path(".env"), override=False)

DEFAULT_SERVER_URL = "http://localhost:5000"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Runtime settings loaded from env with sane defaults."""

    model_config = SettingsConfigDict(
        env_prefix="JSONR8R_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    server_url: str = Field(
        default=DEFAULT_SERVER_URL,
        description="Base URL prefixed to every endpoint path.",
    )
    http_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds to wait on the server; unset means wait indefinitely.",
    )
    log_level: str = Field(default="INFO")

    @field_validator("server_url")
    @classmethod
    def _require_scheme(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("server_url must start with http:// or https://")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
