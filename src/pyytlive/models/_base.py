"""Base model and enum for YouTube API payloads.

Models inherit from :class:`YtBaseModel`:

* ``alias_generator=to_camel`` so camelCase API keys map to snake_case
  fields (``populate_by_name`` keeps snake_case construction working).
* Frozen instances: state updates go through ``model_copy(update=...)``.

Enums inherit from :class:`YtEnum`, a ``StrEnum`` with an ``UNKNOWN``
member returned for any value YouTube sends that has no mapped member.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def parse_rfc3339(value: Any) -> datetime | None:
    """Parse YouTube's ISO 8601 timestamps (``2024-05-01T18:00:00Z``)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


YtTimestamp = Annotated[datetime | None, BeforeValidator(parse_rfc3339)]
"""Annotated type that coerces RFC 3339 strings to aware datetimes."""


class YtEnum(StrEnum):
    """Base for YouTube status enums.

    Every subclass **must** define ``UNKNOWN``.
    """

    @classmethod
    def _missing_(cls, value: object) -> YtEnum:
        unknown: YtEnum = cls["UNKNOWN"]
        return unknown


class YtBaseModel(BaseModel):
    """Base for YouTube payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
