"""
Palettekit Result Cache
Content-addressed, TTL- and size-bounded memoization of extraction results.
"""
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from loguru import logger

from palettekit.config import config
from palettekit.services.colors.models import ExtractionResult


def cache_key(identity: str) -> str:
    """
    Derive a cache key from an image identity (usually its source URI).

    Uses a cheap order-sensitive 32-bit string hash (h = 31*h + c). Two
    identities that collide share one cache slot; this is a known
    limitation, not handled specially.
    """
    h = 0
    for char in identity:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return f"extraction_{abs(h)}"


@dataclass(frozen=True)
class CacheEntry:
    """Single cached extraction. Replaced on write, never updated in place."""
    key: str
    result: ExtractionResult
    created_at: float


class ResultCache:
    """
    In-memory extraction cache with lazy TTL expiry and FIFO eviction.

    Entries older than ``ttl_seconds`` are treated as absent when read.
    When a new key would exceed ``capacity`` the oldest-inserted entry is
    evicted; reading an entry does not extend its life.

    The lock only guards dictionary operations, so a slow ``compute`` in
    :meth:`get_or_compute` never blocks readers. Two concurrent misses on
    the same key both compute, and whichever finishes last wins.
    """

    def __init__(self,
                 capacity: Optional[int] = None,
                 ttl_seconds: Optional[float] = None,
                 clock: Callable[[], float] = time.time):
        self.capacity = capacity if capacity is not None else config.CACHE_CAPACITY
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else config.CACHE_TTL_SECONDS
        if self.capacity < 1:
            raise ValueError(f"Cache capacity must be positive, got {self.capacity}")
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self.stats = {"hits": 0, "misses": 0, "evictions": 0, "expired": 0}

    def get(self, key: str) -> Optional[ExtractionResult]:
        """Return the cached result, or None on a miss or expired entry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.stats["misses"] += 1
                return None

            if not isinstance(entry, CacheEntry) or not isinstance(entry.result, ExtractionResult):
                logger.warning(f"Dropping corrupted cache entry {key}")
                del self._entries[key]
                self.stats["misses"] += 1
                return None

            if self._clock() - entry.created_at > self.ttl_seconds:
                logger.debug(f"Cache entry {key} expired")
                del self._entries[key]
                self.stats["expired"] += 1
                self.stats["misses"] += 1
                return None

            self.stats["hits"] += 1
            return entry.result

    def put(self, key: str, result: ExtractionResult) -> None:
        """
        Insert or replace ``key``, evicting the oldest entry if full.

        Replacing an existing key resets its TTL but keeps its original
        position in the eviction order.
        """
        entry = CacheEntry(key=key, result=result, created_at=self._clock())
        with self._lock:
            self._entries[key] = entry
            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                self.stats["evictions"] += 1
                logger.debug(f"Evicted oldest cache entry {evicted}")

    def get_or_compute(self, key: str, compute: Callable[[], ExtractionResult]) -> ExtractionResult:
        """Return the cached result for ``key`` or compute and store it."""
        cached = self.get(key)
        if cached is not None:
            return cached

        result = compute()
        self.put(key, result)
        return result

    def invalidate(self, key: str) -> bool:
        """Remove ``key``; True if it was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove every entry and reset statistics."""
        with self._lock:
            self._entries.clear()
            for name in self.stats:
                self.stats[name] = 0

    def keys(self):
        """Keys in insertion order (oldest first), including expired ones."""
        with self._lock:
            return list(self._entries.keys())

    def get_cache_stats(self) -> Dict[str, Any]:
        """Counters plus hit rate."""
        with self._lock:
            total = self.stats["hits"] + self.stats["misses"]
            return {
                "stats": dict(self.stats),
                "hit_rate": self.stats["hits"] / total if total > 0 else 0.0,
                "size": len(self._entries),
                "capacity": self.capacity,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        """Live-entry check that leaves stats and expired entries untouched."""
        with self._lock:
            entry = self._entries.get(key)
            return (isinstance(entry, CacheEntry)
                    and isinstance(entry.result, ExtractionResult)
                    and self._clock() - entry.created_at <= self.ttl_seconds)
