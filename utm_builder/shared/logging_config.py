"""
Centralized logging configuration for utm-builder.

This module sets up structured logging with:
- Settings-based configuration (log level, console vs JSON output)
- JSON formatting for production, pretty console for development
- Redaction of secret-like fields and clipping of long URL fields
- Sampling rate configuration for high-frequency events
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Optional

import structlog
from structlog.types import EventDict, Processor

from utm_builder.config import LoggingSettings

# Sampling rates for high-frequency events; updated by setup_logging()
SAMPLING_RATES = {
    "url_preview": 0.05,
}

# Sensitive fields to redact from logs
REDACTED_FIELDS = {
    "password",
    "token",
    "api_key",
    "authorization",
    "cookie",
    "secret",
}

# Event fields that may carry a full built URL
URL_FIELDS = {"url", "final_url", "base_url", "short_url", "response_text"}
MAX_LOGGED_URL_LENGTH = 200


def add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO format timestamp to event dict."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact sensitive fields from logs."""
    for key in list(event_dict.keys()):
        lowered = key.lower()
        if lowered in REDACTED_FIELDS or any(
            sensitive in lowered for sensitive in ("password", "token", "secret")
        ):
            if key not in ("level", "event", "timestamp", "logger"):
                event_dict[key] = "***REDACTED***"
    return event_dict


def clip_url_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Shorten URL-valued fields so an 8 KB query string never floods a log line."""
    for key in URL_FIELDS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str) and len(value) > MAX_LOGGED_URL_LENGTH:
            extra = len(value) - MAX_LOGGED_URL_LENGTH
            event_dict[key] = f"{value[:MAX_LOGGED_URL_LENGTH]}...(+{extra})"
    return event_dict


def configure_structlog(log_format: str = "console") -> None:
    """
    Configure structlog with appropriate processors for the output format.

    json: one JSON object per line, for log shippers
    console: pretty colored output for local use
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        clip_url_fields,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            pad_event=15,
            sort_keys=False,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging(log_level: str = "INFO") -> None:
    """
    Configure standard library logging to work with structlog.

    Sets up:
    - Log level from settings
    - Console handler for stdout
    - Format compatible with structlog
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def setup_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Initialize logging system for the application.

    This is the main entry point for logging configuration.
    Called once from the application factory.
    """
    if settings is None:
        settings = LoggingSettings()

    configure_stdlib_logging(settings.log_level)
    configure_structlog(settings.log_format)
    SAMPLING_RATES["url_preview"] = settings.sample_rate_preview

    logger = structlog.get_logger(__name__)
    logger.info(
        "logging_initialized",
        log_level=settings.log_level,
        log_format=settings.log_format,
    )
