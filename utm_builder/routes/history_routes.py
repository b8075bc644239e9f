"""
Build history endpoints.

GET    /api/v1/history        — list, or filter with ?q=
GET    /api/v1/history/{id}   — one saved build (404 when unknown)
POST   /api/v1/history        — build the request body and save it (201)
DELETE /api/v1/history/{id}   — remove; unknown ids are a no-op (204 either way)
DELETE /api/v1/history        — clear everything (204)
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from utm_builder.dependencies import get_history
from utm_builder.errors import NotFoundError
from utm_builder.schemas.dto.responses.url import HistoryListResponse
from utm_builder.schemas.models.url_build import SavedBuild, UrlBuildRequest
from utm_builder.services.build_session import BuildSession
from utm_builder.services.history import HistoryRepository

router = APIRouter(prefix="/api/v1/history", tags=["history"])


@router.get("", response_model=HistoryListResponse, response_model_exclude_none=True)
async def list_history(
    q: Optional[str] = Query(default=None, max_length=512),
    history: HistoryRepository = Depends(get_history),
) -> HistoryListResponse:
    items = history.filter(q) if q is not None else list(history.list())
    return HistoryListResponse(
        items=items, count=len(items), capacity=history.capacity, query=q
    )


@router.get("/{build_id}", response_model=SavedBuild, response_model_exclude_none=True)
async def get_build(
    build_id: str, history: HistoryRepository = Depends(get_history)
) -> SavedBuild:
    build = history.find_by_id(build_id)
    if build is None:
        raise NotFoundError("build not found", field="id")
    return build


@router.post(
    "",
    status_code=201,
    response_model=SavedBuild,
    response_model_exclude_none=True,
)
async def save_build(
    body: UrlBuildRequest, history: HistoryRepository = Depends(get_history)
) -> SavedBuild:
    return BuildSession(body).save(history)


@router.delete("/{build_id}", status_code=204)
async def delete_build(
    build_id: str, history: HistoryRepository = Depends(get_history)
) -> Response:
    history.remove(build_id)
    return Response(status_code=204)


@router.delete("", status_code=204)
async def clear_history(history: HistoryRepository = Depends(get_history)) -> Response:
    history.clear()
    return Response(status_code=204)
