"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from utm_builder.config import AppSettings
from utm_builder.errors import register_error_handlers
from utm_builder.infrastructure.http_client import HttpClient
from utm_builder.infrastructure.shortener import build_providers
from utm_builder.infrastructure.shortener.protocol import ShortenerProvider
from utm_builder.infrastructure.storage.json_file import JsonFileStorage
from utm_builder.infrastructure.storage.protocol import KeyValueStorage
from utm_builder.routes.builder_routes import router as builder_router
from utm_builder.routes.health_routes import router as health_router
from utm_builder.routes.history_routes import router as history_router
from utm_builder.routes.qr_code_routes import router as qr_code_router
from utm_builder.routes.shortener_routes import router as shortener_router
from utm_builder.services.history import HistoryRepository
from utm_builder.services.rate_limiter import ShortenerRateLimiter
from utm_builder.services.shortener import UrlShortenerService
from utm_builder.services.shortener_cache import ShortenedUrlCache
from utm_builder.shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    storage: Optional[KeyValueStorage] = None,
    providers: Optional[Sequence[ShortenerProvider]] = None,
) -> FastAPI:
    """Create and return a fully configured FastAPI application.

    *storage* and *providers* replace the settings-derived file storage and
    shortener providers (tests pass in-memory storage and fake providers).
    """
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        kv_storage = storage
        if kv_storage is None:
            kv_storage = JsonFileStorage(settings.history.history_path)
        app.state.settings = settings
        app.state.storage = kv_storage

        history = HistoryRepository(
            kv_storage,
            storage_key=settings.history.history_storage_key,
            capacity=settings.history.history_capacity,
        )
        history.load()
        app.state.history = history

        http_client = HttpClient(timeout=settings.shortener.shortener_timeout_seconds)
        shortener_providers = (
            list(providers)
            if providers is not None
            else build_providers(settings.shortener, http_client)
        )
        app.state.shortener = UrlShortenerService(
            shortener_providers,
            cache=ShortenedUrlCache(
                kv_storage,
                storage_key=settings.shortener.shortener_cache_storage_key,
                ttl_seconds=settings.shortener.shortener_cache_ttl_seconds,
            ),
            rate_limiter=ShortenerRateLimiter(
                max_requests=settings.shortener.shortener_rate_limit_max_requests,
                window_seconds=settings.shortener.shortener_rate_limit_window_seconds,
            ),
        )
        log.info(
            "app_started",
            history_count=len(history),
            shortener_providers=app.state.shortener.provider_names,
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        history.flush()
        await http_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=None if settings.is_production else settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(builder_router)
    app.include_router(history_router)
    app.include_router(shortener_router)
    app.include_router(qr_code_router)

    return app
