"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Everything they return is created once in the
application lifespan and stored on app.state.
"""

from __future__ import annotations

from fastapi import Request

from utm_builder.services.history import HistoryRepository
from utm_builder.services.shortener import UrlShortenerService


def get_history(request: Request) -> HistoryRepository:
    """Return the process-wide history repository."""
    return request.app.state.history


def get_shortener(request: Request) -> UrlShortenerService:
    return request.app.state.shortener
