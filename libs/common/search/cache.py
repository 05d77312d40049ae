"""Bounded TTL cache for search results.

Entries expire lazily: an entry older than the TTL is reported as a miss on
lookup but is not removed until capacity eviction or clear(). When an insert
finds the cache full, the oldest fifth of the entries (by insertion time) is
dropped in one batch. Lookups do not refresh an entry's age.
"""

import math
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from libs.common.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

EVICTION_FRACTION = 0.2


def normalize_query_key(query: str) -> str:
    """Cache key for a raw query: trimmed and lower-cased."""
    return query.strip().lower()


def is_fresh(inserted_at: float, now: float, ttl_seconds: float) -> bool:
    return (now - inserted_at) < ttl_seconds


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    inserted_at: float


class SearchCache(Generic[T]):
    """Single-owner map of normalized query -> CacheEntry."""

    def __init__(
        self,
        max_size: int = 100,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def keys(self) -> list[str]:
        return list(self._entries)

    def lookup(self, key: str) -> Optional[CacheEntry[T]]:
        """Return the fresh entry for `key`, or None when absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not is_fresh(entry.inserted_at, self._clock(), self.ttl_seconds):
            return None
        return entry

    def insert(self, key: str, value: T) -> CacheEntry[T]:
        if key not in self._entries and len(self._entries) >= self.max_size:
            self._evict_oldest()
        entry = CacheEntry(value=value, inserted_at=self._clock())
        self._entries[key] = entry
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def _evict_oldest(self) -> list[str]:
        count = max(1, math.floor(self.max_size * EVICTION_FRACTION))
        # sorted() is stable, so equal timestamps keep insertion order
        oldest = sorted(self._entries.items(), key=lambda item: item[1].inserted_at)
        evicted = [key for key, _ in oldest[:count]]
        for key in evicted:
            del self._entries[key]
        logger.debug(f"Evicted {len(evicted)} search cache entries")
        return evicted
