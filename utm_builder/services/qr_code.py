"""
QR code generation for built links.

generate_qr_code() validates the data, fills unset options from the data
length, and renders with the ``qrcode`` library:

  width             128 / 256 / 512 / 1024 px for up to 50 / 150 / 300 / more chars
  error correction  M by default, L above 300 chars (more room for data),
                    H when a logo will cover part of the symbol

The rendered width is the largest multiple of the module count that fits in
the requested width, so modules stay whole pixels.
"""

from __future__ import annotations

import io
import math
import re
from datetime import date
from typing import Optional
from urllib.parse import urlsplit

import qrcode
from qrcode.exceptions import DataOverflowError
from qrcode.image.svg import SvgPathImage

from utm_builder.errors import InvalidQrDataError
from utm_builder.schemas.models.qr_code import (
    ErrorCorrectionLevel,
    QrCodeCapacity,
    QrCodeImage,
    QrCodeOptions,
    QrImageFormat,
)
from utm_builder.shared.logging import get_logger
from utm_builder.shared.result import Err, Ok, Result
from utm_builder.shared.validators import (
    MAX_QR_DATA_LENGTH,
    validate_absolute_url,
    validate_qr_code_data,
)

log = get_logger(__name__)

OPTIMAL_URL_LENGTH = 200
LONG_URL_RECOMMENDATION = (
    "URL is quite long. Consider using a shortened URL for a smaller, "
    "more scannable QR code."
)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9.-]")

_ERROR_CORRECTION = {
    ErrorCorrectionLevel.L: qrcode.constants.ERROR_CORRECT_L,
    ErrorCorrectionLevel.M: qrcode.constants.ERROR_CORRECT_M,
    ErrorCorrectionLevel.Q: qrcode.constants.ERROR_CORRECT_Q,
    ErrorCorrectionLevel.H: qrcode.constants.ERROR_CORRECT_H,
}


def recommended_size(length: int) -> int:
    if length <= 50:
        return 128
    if length <= 150:
        return 256
    if length <= 300:
        return 512
    return 1024


def recommended_error_correction(length: int, has_logo: bool = False) -> ErrorCorrectionLevel:
    if has_logo:
        return ErrorCorrectionLevel.H
    if length > 300:
        return ErrorCorrectionLevel.L
    return ErrorCorrectionLevel.M


def capacity_info(data: str) -> Result[QrCodeCapacity, InvalidQrDataError]:
    """Report how much QR capacity *data* needs; URLs also get a length hint."""
    checked = validate_qr_code_data(data)
    if checked.is_err:
        return checked

    length = len(data)
    recommendation = None
    if validate_absolute_url(data).is_ok and length > OPTIMAL_URL_LENGTH:
        recommendation = LONG_URL_RECOMMENDATION
    return Ok(
        QrCodeCapacity(
            length=length,
            estimated_version=min(40, math.ceil(length / 100)),
            capacity_used=round(length / MAX_QR_DATA_LENGTH * 100),
            is_optimal=length <= OPTIMAL_URL_LENGTH,
            recommended_size=recommended_size(length),
            recommended_error_correction=recommended_error_correction(length),
            recommendation=recommendation,
        )
    )


def resolve_options(data: str, options: Optional[QrCodeOptions] = None) -> QrCodeOptions:
    """Fill the width and error correction level the caller left unset."""
    options = options or QrCodeOptions()
    return options.model_copy(
        update={
            "width": options.width or recommended_size(len(data)),
            "error_correction_level": options.error_correction_level
            or recommended_error_correction(len(data)),
        }
    )


def qr_filename(data: str, today: Optional[date] = None) -> str:
    """``qrcode-<domain>-<YYYY-MM-DD>`` for URLs, ``qrcode-<YYYY-MM-DD>`` otherwise."""
    stamp = (today or date.today()).isoformat()
    if validate_absolute_url(data).is_ok:
        host = urlsplit(data).hostname or ""
        if host.startswith("www."):
            host = host[len("www."):]
        return f"qrcode-{_UNSAFE_FILENAME_CHARS.sub('-', host)}-{stamp}"
    return f"qrcode-{stamp}"


def _svg_factory(options: QrCodeOptions) -> type:
    return type(
        "ColoredSvgPathImage",
        (SvgPathImage,),
        {
            "background": options.color_light,
            "QR_PATH_STYLE": {**SvgPathImage.QR_PATH_STYLE, "fill": options.color_dark},
        },
    )


def _render(data: str, options: QrCodeOptions) -> bytes:
    qr = qrcode.QRCode(
        version=None,
        error_correction=_ERROR_CORRECTION[options.error_correction_level],
        box_size=1,
        border=options.margin,
    )
    qr.add_data(data)
    qr.make(fit=True)
    qr.box_size = max(1, options.width // (qr.modules_count + 2 * options.margin))

    if options.image_format is QrImageFormat.SVG:
        image = qr.make_image(image_factory=_svg_factory(options))
    else:
        image = qr.make_image(fill_color=options.color_dark, back_color=options.color_light)
    buffer = io.BytesIO()
    image.save(buffer)
    return buffer.getvalue()


def generate_qr_code(
    data: str,
    options: Optional[QrCodeOptions] = None,
    *,
    today: Optional[date] = None,
) -> Result[QrCodeImage, InvalidQrDataError]:
    """Render *data* as a QR code image.

    Returns:
        ``Ok(QrCodeImage)`` with the resolved options, or
        ``Err(InvalidQrDataError)`` when the data does not fit in a QR code at
        the chosen error correction level.
    """
    checked = validate_qr_code_data(data)
    if checked.is_err:
        return checked

    resolved = resolve_options(data, options)
    try:
        content = _render(data, resolved)
    except DataOverflowError:
        level = resolved.error_correction_level.value
        log.warning("qr_code_data_overflow", length=len(data), error_correction=level)
        return Err(
            InvalidQrDataError(
                f"QR code data is too long for error correction level {level}",
                field="data",
                details={"length": len(data)},
            )
        )

    log.info(
        "qr_code_generated",
        length=len(data),
        width=resolved.width,
        error_correction=resolved.error_correction_level.value,
        image_format=resolved.image_format.value,
    )
    return Ok(
        QrCodeImage(
            data=data,
            options=resolved,
            filename=f"{qr_filename(data, today)}.{resolved.image_format.value}",
            content=content,
        )
    )
