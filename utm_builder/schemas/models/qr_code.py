"""
QR code models.

  ErrorCorrectionLevel  L (~7%) / M (~15%) / Q (~25%) / H (~30%) recovery
  QrImageFormat         rendered image type
  QrCodeOptions         rendering options; width and level are filled in
                        from the data length when left unset
  QrCodeCapacity        how much of the QR capacity some data uses
  QrCodeImage           rendered image bytes plus the options actually used
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from utm_builder.schemas.models.base import DomainModel

QR_SIZE_PRESETS: tuple[int, ...] = (128, 256, 512, 1024)

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class ErrorCorrectionLevel(str, Enum):
    L = "L"
    M = "M"
    Q = "Q"
    H = "H"


class QrImageFormat(str, Enum):
    PNG = "png"
    SVG = "svg"

    @property
    def media_type(self) -> str:
        return "image/png" if self is QrImageFormat.PNG else "image/svg+xml"


class QrCodeOptions(DomainModel):
    width: Optional[int] = Field(default=None, ge=64, le=2048)
    error_correction_level: Optional[ErrorCorrectionLevel] = None
    margin: int = Field(default=4, ge=0, le=16)
    color_dark: str = Field(default="#000000", pattern=HEX_COLOR_PATTERN)
    color_light: str = Field(default="#FFFFFF", pattern=HEX_COLOR_PATTERN)
    image_format: QrImageFormat = QrImageFormat.PNG


class QrCodeCapacity(DomainModel):
    length: int
    estimated_version: int
    capacity_used: int  # percent of the maximum data length
    is_optimal: bool
    recommended_size: int
    recommended_error_correction: ErrorCorrectionLevel
    recommendation: Optional[str] = None


class QrCodeImage(DomainModel):
    data: str
    options: QrCodeOptions
    filename: str
    content: bytes = Field(exclude=True, repr=False)

    @property
    def media_type(self) -> str:
        return self.options.image_format.media_type
