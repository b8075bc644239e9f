"""TinyURL implementation of ShortenerProvider.

TinyURL answers with the short URL as plain text; anything else in the body
is treated as an API error.
"""

from utm_builder.errors import ErrorKind, ShortenError
from utm_builder.infrastructure.shortener.base import (
    ProxiedShortenerProvider,
    is_short_url,
)
from utm_builder.schemas.models.shortener import ShortenedUrl
from utm_builder.shared.result import Err, Ok, Result


class TinyUrlProvider(ProxiedShortenerProvider):
    name = "TinyURL"
    path = "/api/tinyurl"

    async def shorten(self, url: str) -> Result[ShortenedUrl, ShortenError]:
        fetched = await self.fetch(url)
        if fetched.is_err:
            return fetched
        short_url = fetched.value.text.strip()
        if not is_short_url(short_url):
            return Err(
                ShortenError("Invalid response from TinyURL", ErrorKind.API_ERROR)
            )
        return Ok(ShortenedUrl(short_url=short_url, provider=self.name))
