"""Process-local TTL cache for inbox listings.

Each API process owns one ``InboxCache``. Entries are keyed by the shape of the
inbox query and dropped whenever the member's notifications change, so a list
call made after a write never sees pre-write data from this process. Other
processes may serve their own copy until it ages out.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from clubhub.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InboxCacheKey:
    user_id: str
    limit: int
    unread_only: bool


@dataclass(frozen=True)
class _Entry:
    data: dict[str, Any]
    timestamp: float


class InboxCache:
    """Bounded TTL map from ``InboxCacheKey`` to a serialized inbox page."""

    def __init__(
        self,
        ttl_seconds: float = 120.0,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[InboxCacheKey, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: InboxCacheKey) -> bool:
        return key in self._entries

    def get(self, key: InboxCacheKey) -> dict[str, Any] | None:
        """Return the cached page, or None (dropping the entry) if missing or expired."""
        entry = self._entries.get(key)
        if entry is not None and self._clock() - entry.timestamp < self.ttl_seconds:
            logger.debug("Inbox cache hit for %s", key)
            return entry.data
        logger.debug("Inbox cache miss for %s", key)
        self._entries.pop(key, None)
        return None

    def put(self, key: InboxCacheKey, data: dict[str, Any]) -> None:
        # Re-inserting moves the key to the end so eviction order tracks write time
        self._entries.pop(key, None)
        self._entries[key] = _Entry(data=data, timestamp=self._clock())
        if len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]

    def invalidate(self, user_id: str) -> int:
        """Drop every entry belonging to ``user_id``; returns the number removed."""
        stale = [key for key in self._entries if key.user_id == user_id]
        for key in stale:
            self._entries.pop(key, None)
        if stale:
            logger.debug("Invalidated %d inbox cache entries for %s", len(stale), user_id)
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()


@lru_cache
def get_inbox_cache() -> InboxCache:
    """Get the process-wide inbox cache."""
    return InboxCache(
        ttl_seconds=settings.inbox_cache_ttl_seconds,
        max_entries=settings.inbox_cache_max_entries,
    )
