"""
URL build models.

  QueryParameter   one key/value pair; order inside a request is significant
  UrlBuildRequest  unvalidated user intent (base URL, UTM fields, custom params)
  ConstructedUrl   validated engine output with derived metrics
  UtmParameters    the five UTM values as persisted (absent when empty)
  BuildSnapshot    what the history repository receives on save
  SavedBuild       persisted snapshot with identity, creation time and what
                   was done with it since (short link, QR code)
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from utm_builder.schemas.models.base import DomainModel

# Query keys in serialization order; each is also a UrlBuildRequest attribute
UTM_FIELDS: tuple[str, ...] = (
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
)

UTM_KEYS = frozenset(UTM_FIELDS)


class QueryParameter(DomainModel):
    key: str = ""
    value: str = ""

    @property
    def is_complete(self) -> bool:
        """True when both key and value survive whitespace trimming."""
        return bool(self.key.strip() and self.value.strip())


class UrlBuildRequest(DomainModel):
    base_url: str = ""
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_term: Optional[str] = None
    utm_content: Optional[str] = None
    custom_params: tuple[QueryParameter, ...] = ()

    def utm_pairs(self) -> list[tuple[str, str]]:
        """Non-empty UTM fields as trimmed (query key, value) pairs, in order."""
        pairs = []
        for key in UTM_FIELDS:
            value = getattr(self, key)
            if value and value.strip():
                pairs.append((key, value.strip()))
        return pairs

    def custom_pairs(self) -> list[tuple[str, str]]:
        """Complete custom params as trimmed (key, value) pairs, in insertion order."""
        return [
            (param.key.strip(), param.value.strip())
            for param in self.custom_params
            if param.is_complete
        ]


class ConstructedUrl(DomainModel):
    final_url: str
    character_count: int
    parameter_count: int


class UtmParameters(DomainModel):
    source: Optional[str] = None
    medium: Optional[str] = None
    campaign: Optional[str] = None
    term: Optional[str] = None
    content: Optional[str] = None

    @classmethod
    def from_request(cls, request: UrlBuildRequest) -> "UtmParameters":
        values = {key[len("utm_"):]: value for key, value in request.utm_pairs()}
        return cls(**values)

    def filled_values(self) -> list[str]:
        return [
            value
            for value in (self.source, self.medium, self.campaign, self.term, self.content)
            if value
        ]


class BuildSnapshot(DomainModel):
    final_url: str
    base_url: str
    utm_params: UtmParameters = Field(default_factory=UtmParameters)
    custom_params: tuple[QueryParameter, ...] = ()

    @classmethod
    def from_build(
        cls, request: UrlBuildRequest, constructed: ConstructedUrl
    ) -> "BuildSnapshot":
        """Capture a successful build; only the params actually emitted are kept."""
        return cls(
            final_url=constructed.final_url,
            base_url=request.base_url,
            utm_params=UtmParameters.from_request(request),
            custom_params=tuple(
                QueryParameter(key=key, value=value)
                for key, value in request.custom_pairs()
            ),
        )


class SavedBuild(BuildSnapshot):
    id: str
    created_at: datetime
    shortened_url: Optional[str] = None
    shortened_by: Optional[str] = None
    qr_code_generated: bool = False

    def to_request(self) -> UrlBuildRequest:
        """Rebuild the request this snapshot was taken from."""
        return UrlBuildRequest(
            base_url=self.base_url,
            utm_source=self.utm_params.source,
            utm_medium=self.utm_params.medium,
            utm_campaign=self.utm_params.campaign,
            utm_term=self.utm_params.term,
            utm_content=self.utm_params.content,
            custom_params=self.custom_params,
        )
