"""
URL builder endpoints.

POST /api/v1/build    — live preview: final URL and its metrics
POST /api/v1/validate — every field-level problem at once, for form feedback
POST /api/v1/parse    — split an existing URL back into builder fields

Validation failures surface as 400 responses through the global AppError
handler (``code`` is ``invalid_url``, ``duplicate_key``, ...).
"""

from __future__ import annotations

from fastapi import APIRouter

from utm_builder.schemas.dto.requests.url import ParseUrlRequest
from utm_builder.schemas.dto.responses.url import ValidationReport
from utm_builder.schemas.models.url_build import ConstructedUrl, UrlBuildRequest
from utm_builder.services.build_session import BuildSession
from utm_builder.services.url_builder import parse_url
from utm_builder.shared.validators import collect_field_errors

router = APIRouter(prefix="/api/v1", tags=["builder"])


@router.post("/build", response_model=ConstructedUrl)
async def build(body: UrlBuildRequest) -> ConstructedUrl:
    return BuildSession(body).result.unwrap()


@router.post("/validate", response_model=ValidationReport)
async def validate(body: UrlBuildRequest) -> ValidationReport:
    errors = collect_field_errors(body)
    return ValidationReport(valid=not errors, errors=[e.to_dict() for e in errors])


@router.post(
    "/parse",
    response_model=UrlBuildRequest,
    response_model_exclude_none=True,
)
async def parse(body: ParseUrlRequest) -> UrlBuildRequest:
    return parse_url(body.url).unwrap()
