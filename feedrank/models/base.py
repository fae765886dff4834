"""Shared value types for candidates and profiles."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

import pendulum
from pendulum.parsing.exceptions import ParserError
from pydantic import BaseModel, ConfigDict, Field


class FrozenModel(BaseModel):
    """Base model for immutable engine inputs."""

    model_config = ConfigDict(frozen=True)


class AuthorStatus(str, Enum):
    """Moderation status of a content author."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANNED = "banned"


class Coordinates(FrozenModel):
    """Latitude/longitude pair in degrees."""

    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")


class Engagement(FrozenModel):
    """Engagement counters."""

    likes: int = Field(0, ge=0, description="Like count")
    comments: int = Field(0, ge=0, description="Comment count")
    saves: int = Field(0, ge=0, description="Save count")


class Moderation(FrozenModel):
    """Moderation state attached to a candidate."""

    report_count: int = Field(0, ge=0, description="Number of user reports")
    author_status: AuthorStatus = Field(AuthorStatus.ACTIVE, description="Author account status")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp leniently.

    Accepts datetimes, ISO-8601 strings and epoch seconds/milliseconds.
    Naive values are taken as UTC. Anything unparseable returns None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return pendulum.instance(value.replace(tzinfo=pendulum.UTC))
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        seconds = value / 1000.0 if value > 1e11 else value
        try:
            return pendulum.from_timestamp(seconds, tz="UTC")
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            parsed = pendulum.parse(value, strict=False)
        except (ParserError, ValueError, OverflowError):
            return None
        if isinstance(parsed, datetime):
            return parsed
    return None
