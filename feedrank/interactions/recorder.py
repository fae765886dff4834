"""Interaction recording with duplicate suppression."""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

import pendulum

from ..models import Interaction
from .dedup import DeduplicationCache, interaction_key

logger = logging.getLogger(__name__)

# Actions a user can hold at most once per item
UNIQUE_ACTIONS = {"like", "save", "subscribe"}
ACTIONS = UNIQUE_ACTIONS | {"share", "comment", "visit", "skip", "report"}


class DuplicateInteractionError(Exception):
    """The same user/item/action arrived again within the dedup window."""


class InteractionStore(ABC):
    """Persistence for user interactions."""

    @abstractmethod
    def exists(self, user_id: str, item_id: str, action: str) -> bool:
        pass

    @abstractmethod
    def add(self, user_id: str, interaction: Interaction) -> None:
        pass

    @abstractmethod
    def history(self, user_id: str) -> List[Interaction]:
        """Interactions of a user, oldest first."""
        pass


class InMemoryInteractionStore(InteractionStore):
    """Thread-safe in-memory interaction store."""

    def __init__(self) -> None:
        self._by_user: Dict[str, List[Interaction]] = {}
        self._lock = threading.Lock()

    def exists(self, user_id: str, item_id: str, action: str) -> bool:
        with self._lock:
            return any(
                i.item_id == item_id and i.action == action for i in self._by_user.get(user_id, [])
            )

    def add(self, user_id: str, interaction: Interaction) -> None:
        with self._lock:
            self._by_user.setdefault(user_id, []).append(interaction)

    def history(self, user_id: str) -> List[Interaction]:
        with self._lock:
            return list(self._by_user.get(user_id, []))


class InteractionRecorder:
    """Record interactions, rejecting client retries within the window."""

    def __init__(self, store: InteractionStore, cache: DeduplicationCache) -> None:
        self.store = store
        self.cache = cache

    def record(
        self,
        user_id: str,
        item_id: str,
        action: str,
        item_kind: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> Optional[Interaction]:
        """
        Record an interaction.

        Args:
            user_id: Acting user
            item_id: Target item
            action: One of ACTIONS
            item_kind: location, post or event
            timestamp: Defaults to now

        Returns:
            The stored interaction, or None if a unique action already existed

        Raises:
            ValueError: Unknown action
            DuplicateInteractionError: Same request seen within the window
        """
        action = action.lower()
        if action not in ACTIONS:
            raise ValueError(f"Unknown interaction action: {action}")

        key = interaction_key(user_id, item_id, action)
        if self.cache.check_and_mark(key):
            raise DuplicateInteractionError(f"Duplicate request detected for {key}, please wait")

        try:
            if action in UNIQUE_ACTIONS and self.store.exists(user_id, item_id, action):
                logger.debug("Interaction %s already recorded", key)
                return None

            interaction = Interaction(
                item_id=item_id,
                action=action,
                timestamp=timestamp or pendulum.now("UTC"),
                item_kind=item_kind,
            )
            self.store.add(user_id, interaction)
            return interaction
        except Exception:
            # Let the client retry a write that never happened
            self.cache.forget(key)
            raise

    def history_records(self, user_id: str) -> List[Dict]:
        """History as raw records for ProfileSignals.interactions."""
        return [
            {
                "itemId": i.item_id,
                "action": i.action,
                "timestamp": i.timestamp.isoformat() if i.timestamp else None,
                "itemType": i.item_kind,
                "categories": list(i.categories),
                "authorId": i.author_id,
            }
            for i in self.store.history(user_id)
        ]