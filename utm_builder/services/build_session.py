"""
Live preview session.

BuildSession holds the request being edited and the result of building it.
Every mutator swaps in a new request and calls recompute(), which rebuilds
the preview from scratch; there is no incremental update and no dependency
tracking, so the preview can never drift from the request.
"""

from __future__ import annotations

from typing import Optional

from utm_builder.errors import ValidationError
from utm_builder.schemas.models.url_build import (
    UTM_FIELDS,
    BuildSnapshot,
    ConstructedUrl,
    QueryParameter,
    SavedBuild,
    UrlBuildRequest,
)
from utm_builder.services.history import HistoryRepository
from utm_builder.services.url_builder import build_url
from utm_builder.shared.logging import get_logger, should_sample
from utm_builder.shared.result import Result

log = get_logger(__name__)


class BuildSession:
    def __init__(self, request: Optional[UrlBuildRequest] = None) -> None:
        self._request = request or UrlBuildRequest()
        self._result: Result[ConstructedUrl, ValidationError] = build_url(
            self._effective_request()
        )

    @property
    def request(self) -> UrlBuildRequest:
        return self._request

    @property
    def result(self) -> Result[ConstructedUrl, ValidationError]:
        return self._result

    @property
    def preview(self) -> Optional[ConstructedUrl]:
        return self._result.value if self._result.is_ok else None

    @property
    def error(self) -> Optional[ValidationError]:
        return self._result.error if self._result.is_err else None

    @property
    def can_save(self) -> bool:
        return self._result.is_ok

    def _effective_request(self) -> UrlBuildRequest:
        # Trimming happens here, before the validator ever sees the base URL
        return self._request.model_copy(update={"base_url": self._request.base_url.strip()})

    def recompute(self) -> Result[ConstructedUrl, ValidationError]:
        self._result = build_url(self._effective_request())
        if should_sample("url_preview"):
            log.debug(
                "url_preview",
                ok=self._result.is_ok,
                parameter_count=self.preview.parameter_count if self.preview else 0,
            )
        return self._result

    def _replace(self, **changes) -> Result[ConstructedUrl, ValidationError]:
        self._request = self._request.model_copy(update=changes)
        return self.recompute()

    # ── Mutators ─────────────────────────────────────────────────────────────

    def set_base_url(self, base_url: str) -> Result[ConstructedUrl, ValidationError]:
        return self._replace(base_url=base_url)

    def set_utm(self, field: str, value: Optional[str]) -> Result[ConstructedUrl, ValidationError]:
        """Set one UTM field; *field* is a query key such as ``utm_source``."""
        if field not in UTM_FIELDS:
            raise KeyError(f"Unknown UTM field: {field!r}")
        return self._replace(**{field: value})

    def add_parameter(self, key: str = "", value: str = "") -> Result[ConstructedUrl, ValidationError]:
        params = self._request.custom_params + (QueryParameter(key=key, value=value),)
        return self._replace(custom_params=params)

    def update_parameter(
        self,
        index: int,
        *,
        key: Optional[str] = None,
        value: Optional[str] = None,
    ) -> Result[ConstructedUrl, ValidationError]:
        params = list(self._request.custom_params)
        current = params[index]
        params[index] = QueryParameter(
            key=current.key if key is None else key,
            value=current.value if value is None else value,
        )
        return self._replace(custom_params=tuple(params))

    def remove_parameter(self, index: int) -> Result[ConstructedUrl, ValidationError]:
        params = list(self._request.custom_params)
        del params[index]
        return self._replace(custom_params=tuple(params))

    def load(self, request: UrlBuildRequest) -> Result[ConstructedUrl, ValidationError]:
        self._request = request
        return self.recompute()

    def load_saved(self, build: SavedBuild) -> Result[ConstructedUrl, ValidationError]:
        return self.load(build.to_request())

    def reset(self) -> Result[ConstructedUrl, ValidationError]:
        return self.load(UrlBuildRequest())

    # ── Persistence ──────────────────────────────────────────────────────────

    def save(self, repository: HistoryRepository) -> SavedBuild:
        """Save the current build to *repository*.

        Raises:
            ValidationError: the current request does not build.
        """
        constructed = self._result.unwrap()
        snapshot = BuildSnapshot.from_build(self._effective_request(), constructed)
        return repository.add(snapshot)
