"""
Health check endpoint.

GET /health reports two checks:

  storage    "ok" | "error"           history directory writable
  shortener  "ok" | "not_configured"  at least one shortener provider

A storage error makes the service "unhealthy" (503) since nothing can be
saved. A missing shortener only makes it "degraded" (200).
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from utm_builder.shared.logging import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["health"])


def _storage_check(request: Request) -> str:
    storage = request.app.state.storage
    try:
        return "ok" if storage.is_available() else "error"
    except Exception as e:
        log.error("health_storage_check_failed", error=str(e), error_type=type(e).__name__)
        return "error"


def _shortener_check(request: Request) -> str:
    return "ok" if request.app.state.shortener.is_configured else "not_configured"


@router.get("/health")
async def health_check(request: Request) -> JSONResponse:
    checks = {
        "storage": _storage_check(request),
        "shortener": _shortener_check(request),
    }
    if checks["storage"] != "ok":
        overall = "unhealthy"
    elif checks["shortener"] != "ok":
        overall = "degraded"
    else:
        overall = "healthy"

    return JSONResponse(
        status_code=503 if overall == "unhealthy" else 200,
        content={"status": overall, "checks": checks},
    )
