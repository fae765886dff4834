"""Assemble a user profile from raw collaborator signals."""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..models import Coordinates, Interaction, UserProfile
from .records import category_labels, coordinate_dict, ref_id

logger = logging.getLogger(__name__)

# Onboarding travel radius choice (miles) -> search radius in km
TRAVEL_RADIUS_KM = {
    "0.5": 0.8,
    "2": 3.0,
    "5": 8.0,
    "15": 25.0,
    "unlimited": 100.0,
}
DEFAULT_TRAVEL_RADIUS_KM = 8.0

BUDGET_LEVELS = ("free", "budget", "moderate", "premium", "luxury")


class ProfileSignals(BaseModel):
    """Raw signals supplied by the profile collaborator."""

    user: Dict[str, Any] = Field(default_factory=dict, description="User record")
    saved_items: List[Any] = Field(default_factory=list, description="Saved-item records or ids")
    liked_items: List[Any] = Field(default_factory=list, description="Liked-item records or ids")
    followed_authors: List[Any] = Field(default_factory=list, description="Followed user records or ids")
    interactions: List[Dict[str, Any]] = Field(default_factory=list, description="Explicit history")


def travel_radius_km(value: Any) -> Optional[float]:
    """Map an onboarding travel radius choice to kilometers."""
    if value is None or value == "":
        return None
    key = str(value).strip().lower()
    if key in TRAVEL_RADIUS_KM:
        return TRAVEL_RADIUS_KM[key]
    try:
        miles = float(key)
    except ValueError:
        return DEFAULT_TRAVEL_RADIUS_KM
    if miles <= 0:
        return DEFAULT_TRAVEL_RADIUS_KM
    return miles * 1.609344


def _saved_location_id(item: Any) -> Optional[str]:
    # Saved-location rows reference the location; bare ids are taken as-is
    if isinstance(item, dict) and "location" in item:
        return ref_id(item["location"])
    return ref_id(item)


def _interaction(item: Any, action: str, kind: str) -> Optional[Interaction]:
    item_id = _saved_location_id(item) if kind == "location" else ref_id(item)
    if item_id is None:
        return None
    record = item if isinstance(item, dict) else {}
    author = record.get("author") or record.get("createdBy")
    return Interaction(
        item_id=item_id,
        action=action,
        timestamp=record.get("createdAt") or record.get("timestamp"),
        item_kind=kind,
        categories=category_labels(record.get("categories")),
        author_id=ref_id(author),
    )


class ProfileBuilder:
    """Build a UserProfile; absent signals become empty collections."""

    def build(self, signals: Optional[ProfileSignals]) -> UserProfile:
        if signals is None:
            return UserProfile()

        user = signals.user or {}
        preferences = user.get("preferences") if isinstance(user.get("preferences"), dict) else {}
        onboarding = user.get("onboardingData") if isinstance(user.get("onboardingData"), dict) else {}

        interests = category_labels(user.get("interests")) + category_labels(preferences.get("categories"))

        coordinates = coordinate_dict(user.get("coordinates"))
        location = user.get("location")
        if coordinates is None and isinstance(location, dict):
            coordinates = coordinate_dict(location.get("coordinates"))

        saved_ids = {i for i in (_saved_location_id(s) for s in signals.saved_items) if i}
        liked_ids = {i for i in (ref_id(p) for p in signals.liked_items) if i}
        followed_ids = {i for i in (ref_id(u) for u in signals.followed_authors) if i}

        history: List[Interaction] = []
        for raw in signals.interactions:
            interaction = self._explicit_interaction(raw)
            if interaction is not None:
                history.append(interaction)
        if not history:
            # Saves and likes stand in for history when none is recorded
            for saved in signals.saved_items:
                interaction = _interaction(saved, "save", "location")
                if interaction is not None:
                    history.append(interaction)
            for liked in signals.liked_items:
                interaction = _interaction(liked, "like", "post")
                if interaction is not None:
                    history.append(interaction)

        budget = onboarding.get("budgetPreference") or user.get("budgetPreference")
        if not isinstance(budget, str) or budget.lower() not in BUDGET_LEVELS:
            budget = None

        profile = UserProfile(
            interest_categories=interests,
            coordinates=Coordinates(**coordinates) if coordinates else None,
            saved_item_ids=saved_ids,
            liked_item_ids=liked_ids,
            followed_author_ids=followed_ids,
            interaction_history=history,
            travel_radius_km=travel_radius_km(
                onboarding.get("travelRadius") or user.get("travelRadius")
            ),
            budget_preference=budget.lower() if budget else None,
        )
        logger.debug(
            "Built profile: %d interests, %d saved, %d liked, %d followed, %d history",
            len(profile.interest_categories),
            len(saved_ids),
            len(liked_ids),
            len(followed_ids),
            len(history),
        )
        return profile

    @staticmethod
    def _explicit_interaction(raw: Dict[str, Any]) -> Optional[Interaction]:
        if not isinstance(raw, dict):
            return None
        item_id = ref_id(raw.get("itemId") or raw.get("item_id"))
        action = raw.get("action") or raw.get("type")
        if item_id is None or not isinstance(action, str):
            logger.warning("Skipping malformed interaction entry: %s", raw)
            return None
        return Interaction(
            item_id=item_id,
            action=action.lower(),
            timestamp=raw.get("timestamp") or raw.get("createdAt"),
            item_kind=raw.get("itemType") or raw.get("item_kind"),
            categories=category_labels(raw.get("categories")),
            author_id=ref_id(raw.get("authorId") or raw.get("author_id")),
        )


def build_profile(signals: Optional[ProfileSignals]) -> UserProfile:
    """Build a profile from raw signals."""
    return ProfileBuilder().build(signals)
