"""Time-windowed request deduplication."""

import logging
import threading
import time
from typing import Callable, Dict, Hashable

from ..config import FeedConfig

logger = logging.getLogger(__name__)


class DeduplicationCache:
    """
    Remember recently seen keys for a fixed window.

    Constructed once at service startup and injected into the components
    that need it; ``close`` drops all state. If the lock cannot be acquired
    within ``lock_timeout`` the check answers "not a duplicate".
    """

    def __init__(
        self,
        window_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
        lock_timeout: float = 0.05,
        max_entries: int = 10000,
    ) -> None:
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {window_seconds}")
        self.window_seconds = window_seconds
        self.clock = clock
        self.lock_timeout = lock_timeout
        self.max_entries = max_entries
        self._entries: Dict[Hashable, float] = {}
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def from_config(cls, config: FeedConfig, **kwargs) -> "DeduplicationCache":
        """Build a cache using the configured idempotency window."""
        return cls(window_seconds=config.dedup_window_seconds, **kwargs)

    def __enter__(self) -> "DeduplicationCache":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Drop all entries; further checks raise RuntimeError."""
        with self._lock:
            self._entries.clear()
            self._closed = True

    def check_and_mark(self, key: Hashable) -> bool:
        """
        Record ``key`` and report whether it was already seen in the window.

        Returns:
            True if the key is a duplicate, False otherwise
        """
        if self._closed:
            raise RuntimeError("DeduplicationCache is closed")

        if not self._lock.acquire(timeout=self.lock_timeout):
            logger.warning("Deduplication lock contended; treating %s as new", key)
            return False
        try:
            now = self.clock()
            seen_at = self._entries.get(key)
            if seen_at is not None and now - seen_at < self.window_seconds:
                return True
            self._entries[key] = now
            if len(self._entries) > self.max_entries:
                self._evict(now)
            return False
        finally:
            self._lock.release()

    def forget(self, key: Hashable) -> None:
        """Remove a key, e.g. after the guarded write failed."""
        with self._lock:
            self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Evict entries older than the window; returns how many were removed."""
        with self._lock:
            return self._evict(self.clock())

    def _evict(self, now: float) -> int:
        expired = [k for k, seen_at in self._entries.items() if now - seen_at >= self.window_seconds]
        for key in expired:
            del self._entries[key]
        return len(expired)


def interaction_key(user_id: str, item_id: str, action: str) -> str:
    """Cache key for a user/item/action triple."""
    return f"{user_id}-{item_id}-{action}"
