"""Candidate variants accepted by the ranking engine."""

from datetime import datetime
from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import Field, field_validator

from .base import Coordinates, Engagement, FrozenModel, Moderation, parse_timestamp


class Rankable(FrozenModel):
    """Fields every rankable candidate exposes."""

    id: str = Field(..., description="Identifier, unique within a ranking call")
    categories: Tuple[str, ...] = Field(default=(), description="Ordered category labels")
    coordinates: Optional[Coordinates] = Field(None, description="Item location")
    created_at: Optional[datetime] = Field(None, description="Creation/publication timestamp")
    author_id: Optional[str] = Field(None, description="Author identifier")
    engagement: Engagement = Field(default_factory=Engagement)
    moderation: Moderation = Field(default_factory=Moderation)
    text_content: Optional[str] = Field(None, description="Free text for heuristics and screening")

    @field_validator("created_at", mode="before")
    @classmethod
    def lenient_timestamp(cls, v):
        return parse_timestamp(v)

    @property
    def primary_category(self) -> Optional[str]:
        """First category label, lowercased, or None."""
        if not self.categories:
            return None
        return self.categories[0].strip().lower() or None

    @property
    def location_ref(self) -> Optional[str]:
        """Identifier of the location this candidate refers to."""
        return None


class LocationCandidate(Rankable):
    """A place."""

    kind: Literal["location"] = "location"
    name: Optional[str] = Field(None, description="Location name")
    price_range: Optional[str] = Field(None, description="free/budget/moderate/premium/luxury")

    @property
    def location_ref(self) -> Optional[str]:
        return self.id


class PostCandidate(Rankable):
    """A social post, optionally tagged with a location."""

    kind: Literal["post"] = "post"
    location_id: Optional[str] = Field(None, description="Referenced location")

    @property
    def location_ref(self) -> Optional[str]:
        return self.location_id


class EventCandidate(Rankable):
    """An event hosted at a location."""

    kind: Literal["event"] = "event"
    location_id: Optional[str] = Field(None, description="Venue location")
    starts_at: Optional[datetime] = Field(None, description="Event start time")

    @field_validator("starts_at", mode="before")
    @classmethod
    def lenient_start(cls, v):
        return parse_timestamp(v)

    @property
    def location_ref(self) -> Optional[str]:
        return self.location_id


Candidate = Annotated[
    Union[LocationCandidate, PostCandidate, EventCandidate],
    Field(discriminator="kind"),
]

CANDIDATE_KINDS = ("location", "post", "event")
