"""Helpers shared by the shortener providers.

Every provider is reached through the same proxy contract:

    GET <base_url>/api/<provider>?url=<percent-encoded url>

and maps failures the same way: transport errors are NETWORK_ERROR, 429 is
RATE_LIMIT, any other non-2xx status is API_ERROR.
"""

from typing import Optional
from urllib.parse import quote

import httpx
import validators as _validators

from utm_builder.errors import ErrorKind, ShortenError
from utm_builder.infrastructure.http_client import HttpClient
from utm_builder.shared.logging import get_logger
from utm_builder.shared.result import Err, Ok, Result
from utm_builder.shared.validators import validate_absolute_url

log = get_logger(__name__)


def is_shortenable_url(url: str) -> bool:
    """True for an absolute http/https URL; checked before any request is made."""
    return validate_absolute_url(url, field="url").is_ok


def is_short_url(text: str) -> bool:
    """True when *text* is exactly one bare http/https URL."""
    return is_shortenable_url(text) and _validators.url(text) is True


def error_for_status(provider: str, status_code: int) -> Optional[ShortenError]:
    if 200 <= status_code < 300:
        return None
    if status_code == 429:
        return ShortenError(f"Rate limit exceeded for {provider}", ErrorKind.RATE_LIMIT)
    return ShortenError(f"{provider} API error: {status_code}", ErrorKind.API_ERROR)


class ProxiedShortenerProvider:
    """Base for providers reached through the ``/api/<provider>`` proxy."""

    name: str = ""
    path: str = ""
    extra_query: str = ""

    def __init__(self, http_client: HttpClient, base_url: str) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    def request_url(self, url: str) -> str:
        return f"{self._base_url}{self.path}?{self.extra_query}url={quote(url, safe='')}"

    async def fetch(self, url: str) -> Result[httpx.Response, ShortenError]:
        """Validate *url*, issue the GET and map transport/status failures."""
        if not is_shortenable_url(url):
            return Err(ShortenError("Invalid URL format", ErrorKind.INVALID_URL))
        try:
            response = await self._http.get(self.request_url(url))
        except httpx.RequestError as e:
            log.warning(
                "shortener_request_failed",
                provider=self.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return Err(
                ShortenError(
                    f"Network error: Unable to reach {self.name} service",
                    ErrorKind.NETWORK_ERROR,
                )
            )
        failure = error_for_status(self.name, response.status_code)
        if failure is not None:
            log.warning(
                "shortener_api_error",
                provider=self.name,
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            return Err(failure)
        return Ok(response)
