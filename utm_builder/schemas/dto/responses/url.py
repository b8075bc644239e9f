"""
Response DTOs for the builder and history endpoints.

ValidationReport    — POST /api/v1/validate  (200)
HistoryListResponse — GET /api/v1/history    (200)

Keys are camelCase on the wire, matching the persisted history format.
"""

from __future__ import annotations

from typing import Any, Optional

from utm_builder.schemas.models.base import DomainModel
from utm_builder.schemas.models.url_build import SavedBuild


class ValidationReport(DomainModel):
    """All field-level problems for one request; ``valid`` is True when there are none."""

    valid: bool
    errors: list[dict[str, Any]] = []


class HistoryListResponse(DomainModel):
    items: list[SavedBuild]
    count: int
    capacity: int
    query: Optional[str] = None
