"""Configuration models."""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field, model_validator


class GeoPolicy(str, Enum):
    """Distance decay policy for the geo relevance factor."""

    EXPONENTIAL = "exponential"  # feed ranking
    RADIUS = "radius"  # explorer ranking


class HistorySignal(str, Enum):
    """How interaction history contributes to behavioral affinity."""

    ANY = "any"
    RELATED = "related"


class AnonymousOrder(str, Enum):
    """Ordering used when no profile is available."""

    RECENCY = "recency"
    POPULARITY = "popularity"


class MealBand(BaseModel):
    """Hour-of-day band with the keywords that make content relevant in it."""

    name: str = Field(..., description="Band name")
    start_hour: int = Field(..., ge=0, le=23, description="First hour (inclusive)")
    end_hour: int = Field(..., ge=0, le=23, description="Last hour (inclusive)")
    keywords: List[str] = Field(default_factory=list, description="Matching keywords")


DEFAULT_MEAL_BANDS = [
    MealBand(name="breakfast", start_hour=6, end_hour=11, keywords=["breakfast", "coffee"]),
    MealBand(name="lunch", start_hour=11, end_hour=15, keywords=["lunch", "restaurant"]),
    MealBand(name="dinner", start_hour=17, end_hour=22, keywords=["dinner", "restaurant", "bar"]),
]

DEFAULT_INTEREST_ALIASES: Dict[str, List[str]] = {
    "coffee": ["cafe", "coffee shop", "bakery"],
    "restaurants": ["restaurant", "dining", "food"],
    "nature": ["park", "garden", "nature", "outdoor"],
    "photography": ["scenic", "viewpoint", "landmark", "art"],
    "nightlife": ["bar", "club", "nightlife", "entertainment"],
    "shopping": ["shop", "market", "retail", "boutique"],
    "arts": ["museum", "gallery", "theater", "cultural"],
    "sports": ["sports", "recreation", "fitness", "gym"],
    "markets": ["market", "farmer market", "local business"],
    "events": ["event venue", "concert hall", "entertainment"],
}


class RankingConfig(BaseModel):
    """Ranking configuration.

    Factor weights must sum to 1.0. The diversity weight is applied to the
    neutral diversity value (1.0) when composing; the diversified selector
    then scales the composed score by the per-item diversity multiplier.
    The report threshold and objectionable keywords are safety settings and
    live in ``SafetyConfig``; both sections sit side by side in ``ConfigModel``.
    """

    # Factor weights
    interest_weight: float = Field(0.30, ge=0.0, le=1.0)
    geo_weight: float = Field(0.20, ge=0.0, le=1.0)
    temporal_weight: float = Field(0.15, ge=0.0, le=1.0)
    popularity_weight: float = Field(0.20, ge=0.0, le=1.0)
    behavioral_weight: float = Field(0.10, ge=0.0, le=1.0)
    diversity_weight: float = Field(0.05, ge=0.0, le=1.0)

    # Geo relevance
    geo_policy: GeoPolicy = Field(GeoPolicy.EXPONENTIAL, description="Distance decay policy")
    decay_radius_km: float = Field(25.0, gt=0.0, description="Exponential decay constant")
    default_travel_radius_km: float = Field(8.0, gt=0.0, description="Radius policy fallback")
    very_close_km: float = Field(1.0, ge=0.0)
    nearby_km: float = Field(3.0, ge=0.0)

    # Temporal relevance
    meal_bands: List[MealBand] = Field(default_factory=lambda: list(DEFAULT_MEAL_BANDS))
    meal_boost: float = Field(1.1, ge=0.0)

    # Popularity
    like_divisor: float = Field(50.0, gt=0.0)
    comment_divisor: float = Field(20.0, gt=0.0)
    save_divisor: float = Field(30.0, gt=0.0)
    popularity_cap: float = Field(2.0, ge=1.0)

    # Behavioral affinity
    liked_bonus: float = Field(0.3, ge=0.0)
    followed_author_bonus: float = Field(0.4, ge=0.0)
    saved_location_bonus: float = Field(0.3, ge=0.0)
    history_bonus: float = Field(0.2, ge=0.0)
    history_signal: HistorySignal = Field(HistorySignal.ANY)

    # Interest match
    interest_aliases: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_INTEREST_ALIASES.items()}
    )

    # Diversified selection
    category_cap: int = Field(3, ge=1, description="Max items per primary category")
    author_cap: int = Field(3, ge=1, description="Max items per author")
    category_penalty: float = Field(0.05, ge=0.0, le=1.0)
    author_penalty: float = Field(0.10, ge=0.0, le=1.0)
    penalty_floor: float = Field(0.5, ge=0.0, le=1.0)
    bootstrap_fraction: float = Field(0.3, ge=0.0, le=1.0)

    # Anonymous fallback
    anonymous_order: AnonymousOrder = Field(AnonymousOrder.RECENCY)

    @model_validator(mode="after")
    def weights_sum_to_one(self) -> "RankingConfig":
        """Validate that factor weights sum to 1.0."""
        total = (
            self.interest_weight
            + self.geo_weight
            + self.temporal_weight
            + self.popularity_weight
            + self.behavioral_weight
            + self.diversity_weight
        )
        if abs(total - 1.0) > 0.001:
            raise ValueError(f"Weights must sum to 1.0, got {total}")
        return self


DEFAULT_OBJECTIONABLE_KEYWORDS = [
    "nsfw",
    "explicit content",
    "hate speech",
    "scam",
    "buy followers",
    "violence",
]


class SafetyConfig(BaseModel):
    """Content safety filter configuration."""

    report_threshold: int = Field(5, ge=0, description="Reports above this exclude an item")
    objectionable_keywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_OBJECTIONABLE_KEYWORDS),
        description="Case-insensitive substrings that exclude an item",
    )
    blocked_author_statuses: List[str] = Field(
        default_factory=lambda: ["suspended", "banned"],
        description="Author statuses that exclude an item",
    )


class FeedConfig(BaseModel):
    """Feed request defaults."""

    default_limit: int = Field(20, ge=1, le=100)
    max_limit: int = Field(100, ge=1, le=500)
    dedup_window_seconds: float = Field(5.0, gt=0.0, description="Interaction idempotency window")


class ConfigModel(BaseModel):
    """Main configuration model."""

    ranking: RankingConfig = Field(default_factory=RankingConfig)
    safety: SafetyConfig = Field(default_factory=SafetyConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
