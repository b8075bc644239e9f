"""
QR code endpoints.

POST /api/v1/qr-code       — render data (usually a built or shortened link)
                             as PNG or SVG. The body of the response is the
                             image; the options actually used come back in
                             X-QR-* headers. With buildId the saved build is
                             marked as having a QR code (404 when unknown).
POST /api/v1/qr-code/check — capacity report and recommended options
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from utm_builder.dependencies import get_history
from utm_builder.errors import NotFoundError
from utm_builder.schemas.dto.requests.url import QrCodeCheckRequest, QrCodeRequest
from utm_builder.schemas.models.qr_code import QrCodeCapacity
from utm_builder.services.history import HistoryRepository
from utm_builder.services.qr_code import capacity_info, generate_qr_code

router = APIRouter(prefix="/api/v1/qr-code", tags=["qr-code"])


@router.post("")
async def create_qr_code(
    body: QrCodeRequest, history: HistoryRepository = Depends(get_history)
) -> Response:
    if body.build_id is not None and history.find_by_id(body.build_id) is None:
        raise NotFoundError("build not found", field="build_id")

    image = generate_qr_code(body.data, body.options).unwrap()
    if body.build_id is not None:
        history.mark_qr_code_generated(body.build_id)

    return Response(
        content=image.content,
        media_type=image.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{image.filename}"',
            "X-QR-Width": str(image.options.width),
            "X-QR-Error-Correction": image.options.error_correction_level.value,
        },
    )


@router.post("/check", response_model=QrCodeCapacity, response_model_exclude_none=True)
async def check_qr_code(body: QrCodeCheckRequest) -> QrCodeCapacity:
    return capacity_info(body.data).unwrap()
