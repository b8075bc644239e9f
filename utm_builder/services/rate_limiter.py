"""
Rate limiter for outgoing shortener requests.

A moving window from the ``limits`` library (the engine under flask-limiter
and slowapi): at most ``max_requests`` calls in any ``window_seconds`` span.
All calls share one bucket since the limit protects the upstream providers,
not a particular client.
"""

from __future__ import annotations

import time

from limits import parse
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

NAMESPACE = "shortener"


class ShortenerRateLimiter:
    def __init__(self, max_requests: int = 50, window_seconds: int = 3600) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be at least 1")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._item = parse(f"{max_requests}/{window_seconds} seconds")
        self._limiter = MovingWindowRateLimiter(MemoryStorage())

    def can_make_request(self) -> bool:
        return self._limiter.test(self._item, NAMESPACE)

    def acquire(self) -> bool:
        """Spend one request if the window allows it.

        Check and spend happen in one step, so concurrent callers can never
        overdraw the window.
        """
        return self._limiter.hit(self._item, NAMESPACE)

    def remaining(self) -> int:
        return max(0, self._limiter.get_window_stats(self._item, NAMESPACE).remaining)

    def seconds_until_refill(self) -> float:
        """Seconds until the oldest request in the window expires."""
        reset_time = self._limiter.get_window_stats(self._item, NAMESPACE).reset_time
        return max(0.0, min(float(self.window_seconds), reset_time - time.time()))

    def reset(self) -> None:
        self._limiter.clear(self._item, NAMESPACE)
