"""
Unit tests for logging helpers: redaction and sampling.
"""

import pytest

from utm_builder.config import LoggingSettings
from utm_builder.shared import logging_config
from utm_builder.shared.logging import SAMPLING_RATES, setup_logging, should_sample
from utm_builder.shared.logging_config import clip_url_fields, redact_sensitive_fields


def test_redacts_secret_like_fields():
    event = {
        "event": "shortener_request_failed",
        "api_key": "abc",
        "auth_token": "xyz",
        "provider": "TinyURL",
    }
    redacted = redact_sensitive_fields(None, "info", event)
    assert redacted["api_key"] == "***REDACTED***"
    assert redacted["auth_token"] == "***REDACTED***"
    assert redacted["provider"] == "TinyURL"
    assert redacted["event"] == "shortener_request_failed"


def test_clips_long_url_fields():
    long_url = "https://example.com/?q=" + "x" * 500
    event = {"event": "url_shortened", "url": long_url, "provider": "TinyURL" * 40}
    clipped = clip_url_fields(None, "info", event)
    assert clipped["url"] == f"{long_url[:200]}...(+{len(long_url) - 200})"
    assert clipped["provider"] == "TinyURL" * 40


def test_short_url_fields_untouched():
    event = {"event": "url_shortened", "short_url": "https://tinyurl.com/a"}
    assert clip_url_fields(None, "info", dict(event)) == event


@pytest.fixture
def restore_sampling():
    saved = dict(SAMPLING_RATES)
    yield
    SAMPLING_RATES.clear()
    SAMPLING_RATES.update(saved)


def test_should_sample_bounds(restore_sampling):
    SAMPLING_RATES["url_preview"] = 0.0
    assert should_sample("url_preview") is False
    SAMPLING_RATES["url_preview"] = 1.0
    assert should_sample("url_preview") is True
    assert should_sample("unconfigured_event") is True


def test_setup_logging_applies_sample_rate(restore_sampling, mocker):
    configure = mocker.patch.object(logging_config, "configure_structlog")
    setup_logging(LoggingSettings(log_format="json", sample_rate_preview=0.5))
    configure.assert_called_once_with("json")
    assert SAMPLING_RATES["url_preview"] == 0.5
