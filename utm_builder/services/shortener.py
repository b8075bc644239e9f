"""
URL shortener service.

Coordinates providers, cache and rate limiting:

  1. reject non-http(s) URLs locally (INVALID_URL)
  2. answer from the cache when possible (provider "cache")
  3. spend one request from the rate limiter, or refuse (RATE_LIMIT)
  4. try each provider in order, falling back to the next on failure
  5. cache the first success

One ``shorten`` call spends one request however many providers it tries.
No provider call is retried; when all of them fail the caller gets one
API_ERROR listing each provider's failure in ``details``.
"""

from __future__ import annotations

import math
from typing import Sequence

from utm_builder.errors import ErrorKind, ShortenError
from utm_builder.infrastructure.shortener.base import is_shortenable_url
from utm_builder.infrastructure.shortener.protocol import ShortenerProvider
from utm_builder.schemas.models.shortener import ShortenedUrl
from utm_builder.services.rate_limiter import ShortenerRateLimiter
from utm_builder.services.shortener_cache import ShortenedUrlCache
from utm_builder.shared.logging import get_logger
from utm_builder.shared.result import Err, Ok, Result

log = get_logger(__name__)

CACHE_PROVIDER = "cache"


class UrlShortenerService:
    def __init__(
        self,
        providers: Sequence[ShortenerProvider],
        cache: ShortenedUrlCache,
        rate_limiter: ShortenerRateLimiter,
    ) -> None:
        self._providers = list(providers)
        self._cache = cache
        self._rate_limiter = rate_limiter

    @property
    def is_configured(self) -> bool:
        return bool(self._providers)

    @property
    def provider_names(self) -> list[str]:
        return [provider.name for provider in self._providers]

    async def shorten(self, url: str) -> Result[ShortenedUrl, ShortenError]:
        if not is_shortenable_url(url):
            return Err(ShortenError("Invalid URL format", ErrorKind.INVALID_URL))

        cached = self._cache.get(url)
        if cached is not None:
            return Ok(ShortenedUrl(short_url=cached, provider=CACHE_PROVIDER))

        if not self._providers:
            log.warning("shortener_not_configured")
            return Err(
                ShortenError("URL shortening is not configured", ErrorKind.API_ERROR)
            )

        if not self._rate_limiter.acquire():
            minutes = math.ceil(self._rate_limiter.seconds_until_refill() / 60)
            log.warning("shortener_rate_limited", retry_after_minutes=minutes)
            return Err(
                ShortenError(
                    f"Rate limit exceeded. Please try again in {minutes} minute(s).",
                    ErrorKind.RATE_LIMIT,
                    details={"retry_after_minutes": minutes},
                )
            )

        failures = []
        for provider in self._providers:
            result = await provider.shorten(url)
            if result.is_ok:
                shortened = result.value
                self._cache.set(url, shortened.short_url, shortened.provider)
                log.info("url_shortened", provider=shortened.provider)
                return result
            log.warning(
                "shortener_provider_failed",
                provider=provider.name,
                kind=result.error.kind.value,
                error=result.error.message,
            )
            failures.append(
                {
                    "provider": provider.name,
                    "kind": result.error.kind.value,
                    "error": result.error.message,
                }
            )

        return Err(
            ShortenError(
                "All URL shortening providers failed. Please try again later.",
                ErrorKind.API_ERROR,
                details=failures,
            )
        )

    def rate_limit_info(self) -> dict:
        return {
            "remaining": self._rate_limiter.remaining(),
            "seconds_until_refill": self._rate_limiter.seconds_until_refill(),
            "can_make_request": self._rate_limiter.can_make_request(),
        }

    def cache_stats(self) -> dict[str, int]:
        return self._cache.stats()

    def clear_cache(self) -> None:
        self._cache.clear()
