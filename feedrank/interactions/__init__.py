"""Interaction recording and request deduplication."""

from .dedup import DeduplicationCache, interaction_key
from .recorder import (
    DuplicateInteractionError,
    InMemoryInteractionStore,
    InteractionRecorder,
    InteractionStore,
)

__all__ = [
    "DeduplicationCache",
    "DuplicateInteractionError",
    "InMemoryInteractionStore",
    "InteractionRecorder",
    "InteractionStore",
    "interaction_key",
]
