"""
URL shortener models.

  ShortenedUrl    successful shortening result (short URL + provider name)
  CachedShortUrl  cache entry with its creation time and time-to-live
"""

from __future__ import annotations

from utm_builder.schemas.models.base import DomainModel


class ShortenedUrl(DomainModel):
    short_url: str
    provider: str


class CachedShortUrl(DomainModel):
    original_url: str
    short_url: str
    provider: str
    timestamp: float  # Unix seconds
    ttl: float  # seconds

    def is_expired(self, now: float) -> bool:
        return now - self.timestamp > self.ttl
