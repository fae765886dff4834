"""Data models for the ranking engine."""

from .base import AuthorStatus, Coordinates, Engagement, Moderation, parse_timestamp
from .candidate import (
    CANDIDATE_KINDS,
    Candidate,
    EventCandidate,
    LocationCandidate,
    PostCandidate,
    Rankable,
)
from .profile import Interaction, UserProfile

__all__ = [
    "AuthorStatus",
    "CANDIDATE_KINDS",
    "Candidate",
    "Coordinates",
    "Engagement",
    "EventCandidate",
    "Interaction",
    "LocationCandidate",
    "Moderation",
    "PostCandidate",
    "Rankable",
    "UserProfile",
    "parse_timestamp",
]
