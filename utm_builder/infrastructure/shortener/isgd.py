"""is.gd implementation of ShortenerProvider.

Requested with ``format=json``; the body is ``{"shorturl": ...}`` on success
or ``{"errorcode": ..., "errormessage": ...}`` when is.gd refuses the URL.
"""

from utm_builder.errors import ErrorKind, ShortenError
from utm_builder.infrastructure.shortener.base import (
    ProxiedShortenerProvider,
    is_short_url,
)
from utm_builder.schemas.models.shortener import ShortenedUrl
from utm_builder.shared.result import Err, Ok, Result


class IsGdProvider(ProxiedShortenerProvider):
    name = "is.gd"
    path = "/api/isgd"
    extra_query = "format=json&"

    async def shorten(self, url: str) -> Result[ShortenedUrl, ShortenError]:
        fetched = await self.fetch(url)
        if fetched.is_err:
            return fetched
        try:
            data = fetched.value.json()
        except ValueError:
            return Err(ShortenError("Invalid response from is.gd", ErrorKind.API_ERROR))
        if not isinstance(data, dict):
            return Err(ShortenError("Invalid response from is.gd", ErrorKind.API_ERROR))

        if data.get("errormessage"):
            return Err(
                ShortenError(f"is.gd error: {data['errormessage']}", ErrorKind.API_ERROR)
            )
        short_url = data.get("shorturl")
        if not isinstance(short_url, str) or not is_short_url(short_url.strip()):
            return Err(ShortenError("Invalid response from is.gd", ErrorKind.API_ERROR))
        return Ok(ShortenedUrl(short_url=short_url.strip(), provider=self.name))
