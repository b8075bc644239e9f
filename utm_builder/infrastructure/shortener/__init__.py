"""Shortener providers and the registry used to build them from settings."""

from __future__ import annotations

from utm_builder.config import ShortenerSettings
from utm_builder.infrastructure.http_client import HttpClient
from utm_builder.infrastructure.shortener.isgd import IsGdProvider
from utm_builder.infrastructure.shortener.protocol import ShortenerProvider
from utm_builder.infrastructure.shortener.tinyurl import TinyUrlProvider
from utm_builder.shared.logging import get_logger

log = get_logger(__name__)

PROVIDERS = {
    "tinyurl": TinyUrlProvider,
    "isgd": IsGdProvider,
}


def build_providers(
    settings: ShortenerSettings, http_client: HttpClient
) -> list[ShortenerProvider]:
    """Instantiate the configured providers in fallback order.

    Returns an empty list unless both a base URL and provider names are
    configured. Unknown provider names are logged and skipped.
    """
    if not settings.is_configured:
        return []
    providers: list[ShortenerProvider] = []
    for name in settings.shortener_providers:
        provider_cls = PROVIDERS.get(name.lower())
        if provider_cls is None:
            log.warning("shortener_provider_unknown", provider=name)
            continue
        providers.append(provider_cls(http_client, settings.shortener_base_url))
    return providers


__all__ = ["PROVIDERS", "build_providers", "IsGdProvider", "TinyUrlProvider"]
