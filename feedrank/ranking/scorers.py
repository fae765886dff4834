"""Individual scoring components for candidate ranking."""

import math
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Optional

import pendulum

from ..config import GeoPolicy, HistorySignal, MealBand, RankingConfig
from ..models import LocationCandidate, Rankable, UserProfile
from .geo import haversine_km
from .models import FactorScore

POSITIVE_ACTIONS = {"like", "save"}


def reference_time(context: Optional[Dict] = None) -> datetime:
    """Return the injected "now" from the scoring context, or the current time."""
    if context and context.get("now") is not None:
        now = context["now"]
        if now.tzinfo is None:
            now = pendulum.instance(now.replace(tzinfo=pendulum.UTC))
        return now
    return pendulum.now("UTC")


class BaseScorer(ABC):
    """Base class for scoring components."""

    def __init__(self, config: Optional[RankingConfig] = None) -> None:
        self.config = config or RankingConfig()

    @abstractmethod
    def score(
        self,
        candidate: Rankable,
        profile: UserProfile,
        context: Optional[Dict] = None,
    ) -> FactorScore:
        """
        Score a candidate for a profile.

        Args:
            candidate: Candidate to score
            profile: Profile of the viewer
            context: Additional context (e.g. the reference time under "now")

        Returns:
            Sub-score with zero or more match reasons
        """
        pass


class InterestScorer(BaseScorer):
    """Fraction of the user's interests found among the candidate categories."""

    def _terms(self, interest: str) -> List[str]:
        key = interest.lower()
        return [key] + [alias.lower() for alias in self.config.interest_aliases.get(key, [])]

    def score(
        self,
        candidate: Rankable,
        profile: UserProfile,
        context: Optional[Dict] = None,
    ) -> FactorScore:
        if not profile.interest_categories:
            return FactorScore(score=0.5)

        categories = [c.lower() for c in candidate.categories]
        matched = [
            interest
            for interest in profile.interest_categories
            if any(term in category for term in self._terms(interest) for category in categories)
        ]
        fraction = len(matched) / len(profile.interest_categories)

        reasons = []
        if matched:
            reasons.append(f"Matches your interests: {', '.join(matched)}")
        return FactorScore(score=fraction, reasons=reasons)


class GeoScorer(BaseScorer):
    """Distance decay between the user and the candidate."""

    def __init__(
        self,
        config: Optional[RankingConfig] = None,
        policy: Optional[GeoPolicy] = None,
    ) -> None:
        super().__init__(config)
        self.policy = policy or self.config.geo_policy

    def decay(self, distance_km: float, travel_radius_km: Optional[float] = None) -> float:
        """Map a distance to a relevance score under the configured policy."""
        if self.policy == GeoPolicy.RADIUS:
            radius = travel_radius_km or self.config.default_travel_radius_km
            if distance_km > radius:
                return 0.0
            return max(0.0, 1.0 - distance_km / radius)
        return math.exp(-distance_km / self.config.decay_radius_km)

    def score(
        self,
        candidate: Rankable,
        profile: UserProfile,
        context: Optional[Dict] = None,
    ) -> FactorScore:
        if profile.coordinates is None or candidate.coordinates is None:
            return FactorScore(score=1.0)

        distance = haversine_km(profile.coordinates, candidate.coordinates)
        if math.isnan(distance):
            return FactorScore(score=1.0)

        score = self.decay(distance, profile.travel_radius_km)
        reasons = []
        if score > 0:
            if distance < self.config.very_close_km:
                reasons.append("Very close to you")
            elif distance < self.config.nearby_km:
                reasons.append("Nearby")
        return FactorScore(score=score, reasons=reasons)


class TemporalScorer(BaseScorer):
    """Recency multiplier combined with a meal-time relevance boost."""

    @staticmethod
    def recency_multiplier(hours: float) -> float:
        if hours < 1:
            return 1.3
        if hours < 6:
            return 1.2
        if hours < 24:
            return 1.1
        if hours > 168:
            return 0.8
        return 1.0

    def meal_band(self, candidate: Rankable, hour: int) -> Optional[MealBand]:
        """Return the first band covering the hour whose keywords the candidate mentions."""
        for band in self.config.meal_bands:
            if band.start_hour <= hour <= band.end_hour and _mentions(candidate, band.keywords):
                return band
        return None

    def score(
        self,
        candidate: Rankable,
        profile: Optional[UserProfile] = None,
        context: Optional[Dict] = None,
    ) -> FactorScore:
        now = reference_time(context)

        multiplier = 1.0
        reasons = []
        if candidate.created_at is not None:
            hours = max(0.0, (now - candidate.created_at).total_seconds() / 3600)
            multiplier = self.recency_multiplier(hours)
            if hours < 1:
                reasons.append("Just posted")

        band = self.meal_band(candidate, now.hour)
        if band is not None:
            multiplier *= self.config.meal_boost
            reasons.append(f"Good for {band.name}")

        return FactorScore(score=multiplier, reasons=reasons)


class PopularityScorer(BaseScorer):
    """Engagement-based score capped so viral items cannot dominate."""

    def score(
        self,
        candidate: Rankable,
        profile: Optional[UserProfile] = None,
        context: Optional[Dict] = None,
    ) -> FactorScore:
        engagement = candidate.engagement
        raw = (
            1.0
            + engagement.likes / self.config.like_divisor
            + engagement.comments / self.config.comment_divisor
            + engagement.saves / self.config.save_divisor
        )
        score = min(self.config.popularity_cap, raw)

        reasons = []
        if score >= self.config.popularity_cap:
            reasons.append("Popular right now")
        return FactorScore(score=score, reasons=reasons)


class BehavioralScorer(BaseScorer):
    """Affinity from the user's likes, follows, saves and history."""

    def _history_matches(self, candidate: Rankable, profile: UserProfile) -> bool:
        positive = [i for i in profile.interaction_history if i.action.lower() in POSITIVE_ACTIONS]
        if self.config.history_signal == HistorySignal.ANY:
            return bool(positive)

        categories = {c.lower() for c in candidate.categories}
        for interaction in positive:
            if candidate.author_id and interaction.author_id == candidate.author_id:
                return True
            if categories & {c.lower() for c in interaction.categories}:
                return True
        return False

    def score(
        self,
        candidate: Rankable,
        profile: UserProfile,
        context: Optional[Dict] = None,
    ) -> FactorScore:
        score = 1.0
        reasons = []

        if self._history_matches(candidate, profile):
            score += self.config.history_bonus

        if candidate.id in profile.liked_item_ids:
            score += self.config.liked_bonus
            reasons.append("You liked this")

        if candidate.author_id and candidate.author_id in profile.followed_author_ids:
            score += self.config.followed_author_bonus
            reasons.append("From someone you follow")

        location_ref = candidate.location_ref
        if location_ref and location_ref in profile.saved_item_ids:
            score += self.config.saved_location_bonus
            reasons.append("At a place you saved")

        return FactorScore(score=score, reasons=reasons)


def budget_reasons(candidate: Rankable, profile: UserProfile) -> List[str]:
    """Score-neutral reason for locations in the user's preferred price range."""
    if not isinstance(candidate, LocationCandidate):
        return []
    if not profile.budget_preference or not candidate.price_range:
        return []
    if candidate.price_range.lower() == profile.budget_preference.lower():
        return [f"Matches your {profile.budget_preference} budget preference"]
    return []


def _mentions(candidate: Rankable, keywords: Iterable[str]) -> bool:
    text = (candidate.text_content or "").lower()
    categories = [c.lower() for c in candidate.categories]
    for keyword in keywords:
        keyword = keyword.lower()
        if keyword in text or any(keyword in category for category in categories):
            return True
    return False
