"""
Base model for all domain models.

Field names are snake_case in Python and camelCase on the wire and in the
persisted history payload (``finalUrl``, ``createdAt``, ``customParams``).
Models are frozen: builds are recomputed or replaced, never patched.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DomainModel(BaseModel):
    """
    Base for all domain models.

    to_json() — dict suitable for json.dumps / storage, camelCase keys, None
                fields dropped
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
