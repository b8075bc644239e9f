"""
Shortener endpoints.

POST /api/v1/shorten        — shorten a URL; failures map to
                              400 INVALID_URL, 429 RATE_LIMIT,
                              503 NETWORK_ERROR, 502 API_ERROR.
                              With buildId the short link is recorded on
                              that saved build (404 when unknown).
GET  /api/v1/shorten/status — rate limiter and cache state
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from utm_builder.dependencies import get_history, get_shortener
from utm_builder.errors import NotFoundError
from utm_builder.schemas.dto.requests.url import ShortenUrlRequest
from utm_builder.schemas.models.shortener import ShortenedUrl
from utm_builder.services.history import HistoryRepository
from utm_builder.services.shortener import UrlShortenerService

router = APIRouter(prefix="/api/v1/shorten", tags=["shortener"])


@router.post("", response_model=ShortenedUrl)
async def shorten(
    body: ShortenUrlRequest,
    shortener: UrlShortenerService = Depends(get_shortener),
    history: HistoryRepository = Depends(get_history),
) -> ShortenedUrl:
    if body.build_id is not None and history.find_by_id(body.build_id) is None:
        raise NotFoundError("build not found", field="build_id")
    shortened = (await shortener.shorten(body.url)).unwrap()
    if body.build_id is not None:
        history.attach_short_url(body.build_id, shortened)
    return shortened


@router.get("/status")
async def shortener_status(
    shortener: UrlShortenerService = Depends(get_shortener),
) -> dict:
    return {
        "configured": shortener.is_configured,
        "providers": shortener.provider_names,
        "rate_limit": shortener.rate_limit_info(),
        "cache": shortener.cache_stats(),
    }
