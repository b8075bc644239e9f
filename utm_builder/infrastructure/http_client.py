"""Async HTTP client shared by the shortener providers."""

from typing import Any, Optional

import httpx

DEFAULT_USER_AGENT = "utm-builder/1.0"


class HttpClient:
    """httpx.AsyncClient with a fixed timeout and redirects left to the caller.

    Shortener proxies answer with the short URL in the body; following a
    redirect would replace that body with the target page.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": DEFAULT_USER_AGENT, **(headers or {})},
            follow_redirects=False,
        )

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._client.get(url, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
