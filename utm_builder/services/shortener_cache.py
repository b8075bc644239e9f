"""
Shortened URL cache.

Two tiers: an in-memory dict for lookups, mirrored to KeyValueStorage under its
own key so short links survive a restart. Entries expire after ``ttl_seconds``;
expired entries are dropped on load and whenever they are read.

Storage problems never reach the caller: a corrupt payload is logged and
discarded, a failed write is logged by the storage backend.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from utm_builder.errors import PersistenceCorruptError
from utm_builder.infrastructure.storage.protocol import KeyValueStorage
from utm_builder.schemas.models.shortener import CachedShortUrl
from utm_builder.shared.logging import get_logger

log = get_logger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60


class ShortenedUrlCache:
    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        storage_key: str = "utm-builder.shortener-cache",
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._key = storage_key
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CachedShortUrl] = {}
        self._load()

    def _load(self) -> None:
        if self._storage is None:
            return
        try:
            payload = self._storage.get_item(self._key)
        except PersistenceCorruptError as e:
            log.warning("shortener_cache_load_corrupt", storage_key=self._key, error=e.message)
            self._storage.remove_item(self._key)
            return
        if payload is None:
            return
        if not isinstance(payload, dict):
            log.warning("shortener_cache_load_incompatible", storage_key=self._key)
            self._storage.remove_item(self._key)
            return

        now = self._clock()
        for url, record in payload.items():
            try:
                cached = CachedShortUrl.model_validate(record)
            except PydanticValidationError:
                continue
            if not cached.is_expired(now):
                self._entries[url] = cached
        self._persist()

    def _persist(self) -> None:
        if self._storage is None:
            return
        self._storage.set_item(
            self._key, {url: entry.to_json() for url, entry in self._entries.items()}
        )

    def get(self, url: str) -> Optional[str]:
        """Return the cached short URL for *url*, or None when absent or expired."""
        cached = self._entries.get(url)
        if cached is None:
            return None
        if cached.is_expired(self._clock()):
            self.delete(url)
            return None
        return cached.short_url

    def set(self, url: str, short_url: str, provider: str) -> None:
        self._entries[url] = CachedShortUrl(
            original_url=url,
            short_url=short_url,
            provider=provider,
            timestamp=self._clock(),
            ttl=self.ttl_seconds,
        )
        self._persist()

    def delete(self, url: str) -> None:
        if self._entries.pop(url, None) is not None:
            self._persist()

    def clear(self) -> None:
        self._entries.clear()
        if self._storage is not None:
            self._storage.remove_item(self._key)

    def stats(self) -> dict[str, int]:
        now = self._clock()
        expired = sum(1 for entry in self._entries.values() if entry.is_expired(now))
        return {
            "size": len(self._entries),
            "valid_entries": len(self._entries) - expired,
            "expired_entries": expired,
        }
