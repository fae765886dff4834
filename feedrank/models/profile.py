"""User profile models."""

from datetime import datetime
from typing import List, Optional, Set, Tuple

from pydantic import BaseModel, Field, field_validator

from .base import Coordinates, FrozenModel, parse_timestamp


class Interaction(FrozenModel):
    """A single past interaction of the user with an item."""

    item_id: str = Field(..., description="Item the user interacted with")
    action: str = Field(..., description="like, save, share, comment, visit")
    timestamp: Optional[datetime] = Field(None, description="When the interaction happened")
    item_kind: Optional[str] = Field(None, description="location, post or event")
    categories: Tuple[str, ...] = Field(default=(), description="Categories of the item")
    author_id: Optional[str] = Field(None, description="Author of the item")

    @field_validator("timestamp", mode="before")
    @classmethod
    def lenient_timestamp(cls, v):
        return parse_timestamp(v)


class UserProfile(BaseModel):
    """Profile assembled once per ranking call."""

    interest_categories: List[str] = Field(default_factory=list, description="Declared interests")
    coordinates: Optional[Coordinates] = Field(None, description="Coarse user location")
    saved_item_ids: Set[str] = Field(default_factory=set)
    liked_item_ids: Set[str] = Field(default_factory=set)
    followed_author_ids: Set[str] = Field(default_factory=set)
    interaction_history: List[Interaction] = Field(default_factory=list)
    travel_radius_km: Optional[float] = Field(None, gt=0.0, description="Explorer travel radius")
    budget_preference: Optional[str] = Field(None, description="Preferred price range")

    @field_validator("interest_categories")
    @classmethod
    def dedupe_interests(cls, v: List[str]) -> List[str]:
        """Drop blanks and case-insensitive duplicates, keeping first occurrence."""
        seen = set()
        result = []
        for interest in v:
            cleaned = interest.strip()
            key = cleaned.lower()
            if cleaned and key not in seen:
                seen.add(key)
                result.append(cleaned)
        return result

    @property
    def is_empty(self) -> bool:
        """True when the profile carries no personal signal at all."""
        return not (
            self.interest_categories
            or self.coordinates
            or self.saved_item_ids
            or self.liked_item_ids
            or self.followed_author_ids
            or self.interaction_history
        )
