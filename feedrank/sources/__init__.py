"""Collaborator interfaces for candidate and profile supply."""

from .base import CandidateSource, ProfileSource
from .memory import InMemoryCandidateSource, InMemoryProfileSource

__all__ = [
    "CandidateSource",
    "InMemoryCandidateSource",
    "InMemoryProfileSource",
    "ProfileSource",
]
