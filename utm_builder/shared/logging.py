"""
Logger factory and sampling helper.

Provides:
- get_logger(): Get a configured logger instance
- should_sample(): Determine if an event should be logged based on sampling rate
"""

import random

import structlog
from structlog.stdlib import BoundLogger

from utm_builder.shared.logging_config import SAMPLING_RATES, setup_logging


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured structlog BoundLogger instance

    Example:
        >>> from utm_builder.shared.logging import get_logger
        >>> log = get_logger(__name__)
        >>> log.info("history_build_saved", build_id="0187...")
    """
    return structlog.get_logger(name)


def should_sample(event_type: str) -> bool:
    """
    Determine if an event should be logged based on sampling rate.

    Unconfigured event types are always logged.
    """
    sample_rate = SAMPLING_RATES.get(event_type, 1.0)
    if sample_rate >= 1.0:
        return True
    if sample_rate <= 0.0:
        return False
    return random.random() < sample_rate


__all__ = ["get_logger", "should_sample", "setup_logging", "SAMPLING_RATES"]
