"""
Request DTOs for the builder, history, shortener and QR code endpoints.

Build bodies reuse ``UrlBuildRequest`` directly; it accepts both snake_case
and camelCase keys (``base_url`` / ``baseUrl``). So do the bodies below that
derive from ``DomainModel``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from utm_builder.schemas.models.base import DomainModel
from utm_builder.schemas.models.qr_code import QrCodeOptions


class ParseUrlRequest(BaseModel):
    """Request body for splitting an existing URL back into builder fields."""

    url: str = Field(max_length=8192)


class ShortenUrlRequest(DomainModel):
    """Request body for shortening a built URL.

    With ``buildId`` the short link is also recorded on that saved build.
    """

    url: str = Field(max_length=8192)
    build_id: Optional[str] = Field(default=None, max_length=64)


class QrCodeRequest(DomainModel):
    """Request body for rendering a QR code.

    With ``buildId`` the saved build is marked as having a QR code.
    """

    data: str = Field(max_length=8192)
    options: Optional[QrCodeOptions] = None
    build_id: Optional[str] = Field(default=None, max_length=64)


class QrCodeCheckRequest(BaseModel):
    data: str = Field(max_length=8192)
