"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).
Each concern gets its own settings class; AppSettings composes them so a
single ``AppSettings()`` call is enough at startup.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HistorySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    history_dir: str = "~/.utm-builder"
    # The history repository is the only writer of this key
    history_storage_key: str = "utm-builder.history"
    history_capacity: int = Field(default=5, ge=1)

    @property
    def history_path(self) -> Path:
        return Path(self.history_dir).expanduser()


class ShortenerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Empty disables shortening; the service answers API_ERROR without a request
    shortener_base_url: str = ""
    shortener_providers: list[str] = ["tinyurl", "isgd"]
    shortener_timeout_seconds: float = 5.0

    shortener_rate_limit_max_requests: int = Field(default=50, ge=1)
    shortener_rate_limit_window_seconds: int = Field(default=3600, ge=1)

    shortener_cache_ttl_seconds: float = Field(default=86400.0, gt=0)
    shortener_cache_storage_key: str = "utm-builder.shortener-cache"

    @property
    def is_configured(self) -> bool:
        return bool(self.shortener_base_url and self.shortener_providers)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production

    # Sampling rate (0.0–1.0) for live-preview rebuild events
    sample_rate_preview: float = Field(default=0.05, ge=0.0, le=1.0)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "utm-builder"

    cors_origins: list[str] = ["*"]

    # OpenAPI docs URL (None disables the docs UI)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    history: Optional[HistorySettings] = None
    shortener: Optional[ShortenerSettings] = None
    logging: Optional[LoggingSettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.history is None:
            self.history = HistorySettings()
        if self.shortener is None:
            self.shortener = ShortenerSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
