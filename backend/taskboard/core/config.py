"""Application settings and environment configuration loading."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BACKEND_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_ENV_FILE = BACKEND_ROOT / ".env"
LOG_FORMATS = frozenset({"text", "json"})


class Settings(BaseSettings):
    """Typed runtime configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        # Load `backend/.env` regardless of current working directory.
        env_file=[DEFAULT_ENV_FILE, ".env"],
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = "dev"

    # Board documents (board.json, events.json, notifications.json, backups).
    data_dir: Path = Path("data")

    # Event log retention and query defaults
    event_log_cap: int = Field(default=1000, ge=1)
    event_query_default_limit: int = Field(default=100, ge=1)

    cors_origins: str = ""

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"
    log_use_utc: bool = False
    request_log_slow_ms: int = Field(default=1000, ge=0)
    request_log_include_health: bool = False

    @model_validator(mode="after")
    def _defaults(self) -> Self:
        if not self.data_dir.is_absolute():
            self.data_dir = BACKEND_ROOT / self.data_dir
        log_format = self.log_format.strip().lower()
        if log_format not in LOG_FORMATS:
            raise ValueError(
                f"LOG_FORMAT must be one of: {', '.join(sorted(LOG_FORMATS))}.",
            )
        self.log_format = log_format
        self.log_level = self.log_level.strip().upper() or "INFO"
        return self


settings = Settings()
