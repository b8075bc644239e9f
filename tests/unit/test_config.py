"""
Unit tests for the settings classes.

Environment is controlled with monkeypatch; .env loading is disabled in conftest.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from utm_builder.config import (
    AppSettings,
    HistorySettings,
    LoggingSettings,
    ShortenerSettings,
)


def test_defaults():
    settings = AppSettings()
    assert settings.app_name == "utm-builder"
    assert settings.is_production is False
    assert settings.history.history_capacity == 5
    assert settings.history.history_storage_key == "utm-builder.history"
    assert settings.shortener.shortener_providers == ["tinyurl", "isgd"]
    assert settings.shortener.is_configured is False
    assert settings.logging.log_format == "console"


def test_history_path_expands_user(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = HistorySettings(history_dir="~/history")
    assert settings.history_path == Path(tmp_path) / "history"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("HISTORY_CAPACITY", "10")
    monkeypatch.setenv("SHORTENER_BASE_URL", "https://short.example.org")
    monkeypatch.setenv("SHORTENER_PROVIDERS", '["isgd"]')
    monkeypatch.setenv("LOG_FORMAT", "json")

    settings = AppSettings()
    assert settings.is_production is True
    assert settings.history.history_capacity == 10
    assert settings.shortener.is_configured is True
    assert settings.shortener.shortener_providers == ["isgd"]
    assert settings.logging.log_format == "json"


def test_capacity_must_be_positive(monkeypatch):
    monkeypatch.setenv("HISTORY_CAPACITY", "0")
    with pytest.raises(ValidationError):
        HistorySettings()


def test_sample_rate_bounds():
    with pytest.raises(ValidationError):
        LoggingSettings(sample_rate_preview=1.5)


def test_explicit_sub_config_is_kept():
    shortener = ShortenerSettings(shortener_base_url="https://short.example.org")
    settings = AppSettings(shortener=shortener)
    assert settings.shortener is shortener
