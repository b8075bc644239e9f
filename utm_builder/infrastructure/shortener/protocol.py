"""ShortenerProvider protocol. Services depend on this, not the concrete implementation."""

from typing import Protocol

from utm_builder.errors import ShortenError
from utm_builder.schemas.models.shortener import ShortenedUrl
from utm_builder.shared.result import Result


class ShortenerProvider(Protocol):
    name: str

    async def shorten(self, url: str) -> Result[ShortenedUrl, ShortenError]: ...
