"""In-process TTL cache.

Entries carry an absolute expiry timestamp and are evicted lazily: an expired
entry is removed the next time it is read. When ``max_entries`` is reached the
oldest insertion is dropped first.
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

from .base import BaseCache


@dataclass
class CacheEntry:
    """A single cache entry."""

    value: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class MemoryCache(BaseCache):
    """Process-local cache with TTL and bounded size.

    Example:
        cache = MemoryCache(max_entries=1000)
        await cache.set("key", "value", ttl_seconds=60)
        value = await cache.get("key")
    """

    def __init__(
        self,
        max_entries: int | None = 10_000,
        clock: Callable[[], float] = time.time,
        on_eviction: Callable[[str, str], None] | None = None,
    ):
        """Initialize the cache.

        Args:
            max_entries: Max number of live entries. None means unbounded.
            clock: Returns the current time in seconds.
            on_eviction: Callback when an entry is evicted (key, value).
        """
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be positive")

        self._max_entries = max_entries
        self._clock = clock
        self._on_eviction = on_eviction

        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.RLock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0

    async def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)

            if entry is None:
                self._misses += 1
                return None

            if entry.is_expired(self._clock()):
                self._remove_entry(key)
                self._misses += 1
                return None

            self._hits += 1
            return entry.value

    async def set(self, key: str, value: str, ttl_seconds: float) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        with self._lock:
            # Last writer wins
            self._entries.pop(key, None)

            if self._max_entries is not None:
                while len(self._entries) >= self._max_entries:
                    self._evict_oldest()

            self._entries[key] = CacheEntry(
                value=value,
                expires_at=self._clock() + ttl_seconds,
            )

    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    async def clear(self) -> int:
        """Remove every entry. Returns the number removed."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            self._clean_expired()
            return len(self._entries)

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            self._clean_expired()
            return {
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "max_entries": self._max_entries,
            }

    def _remove_entry(self, key: str) -> None:
        entry = self._entries.pop(key, None)
        if entry is not None:
            self._evictions += 1
            if self._on_eviction:
                self._on_eviction(key, entry.value)

    def _evict_oldest(self) -> None:
        if not self._entries:
            return
        # Prefer an expired entry over a live one
        now = self._clock()
        for key, entry in self._entries.items():
            if entry.is_expired(now):
                self._remove_entry(key)
                return
        self._remove_entry(next(iter(self._entries)))

    def _clean_expired(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            self._remove_entry(key)
