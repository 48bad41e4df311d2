"""
Cache Utilities

In-memory caching with TTL support and LRU eviction, used for read-mostly
reference data (doctor contracts and working-hours templates).
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A single cache entry with expiration."""

    value: Any
    expires_at: float | None = None  # Clock timestamp, None = no expiration
    created_at: float = field(default_factory=time.monotonic)
    access_count: int = 0
    last_accessed: float = field(default_factory=time.monotonic)

    def is_expired(self, now: float) -> bool:
        """Check if entry has expired at ``now``."""
        if self.expires_at is None:
            return False
        return now >= self.expires_at

    def touch(self, now: float) -> None:
        """Update access tracking."""
        self.access_count += 1
        self.last_accessed = now


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0
    invalidations: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "invalidations": self.invalidations,
            "hit_rate": self.hit_rate,
        }


class MemoryCache:
    """
    In-memory cache with TTL support and LRU eviction.

    Async callers go through the ``async_*`` methods, which serialize access
    with an ``asyncio.Lock``. The clock is injectable so expiry can be tested
    without sleeping.

    Example:
        ```python
        cache = MemoryCache(max_size=1000, default_ttl=900)

        await cache.async_set("doctor:7:contracts", contracts)
        contracts = await cache.async_get("doctor:7:contracts")
        await cache.async_delete_prefix("doctor:7:")
        ```
    """

    def __init__(
        self,
        max_size: int = 1000,
        default_ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize memory cache.

        Args:
            max_size: Maximum number of entries
            default_ttl: Default TTL in seconds (None = no expiration)
            clock: Monotonic time source in seconds
        """
        self.max_size = max_size
        self.default_ttl = default_ttl
        self._clock = clock
        self._cache: dict[str, CacheEntry] = {}
        self._stats = CacheStats()
        self._lock = asyncio.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a value from the cache.

        Args:
            key: Cache key
            default: Default value if not found

        Returns:
            Cached value or default
        """
        entry = self._cache.get(key)

        if entry is None:
            self._stats.misses += 1
            return default

        now = self._clock()
        if entry.is_expired(now):
            del self._cache[key]
            self._stats.expirations += 1
            self._stats.misses += 1
            return default

        entry.touch(now)
        self._stats.hits += 1
        return entry.value

    async def async_get(self, key: str, default: Any = None) -> Any:
        """Async version of get."""
        async with self._lock:
            return self.get(key, default)

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """
        Set a value in the cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time-to-live in seconds (uses default if not specified)
        """
        if len(self._cache) >= self.max_size and key not in self._cache:
            self._evict_lru()

        now = self._clock()
        effective_ttl = ttl if ttl is not None else self.default_ttl
        expires_at = now + effective_ttl if effective_ttl else None

        self._cache[key] = CacheEntry(value=value, expires_at=expires_at, created_at=now, last_accessed=now)

    async def async_set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Async version of set."""
        async with self._lock:
            self.set(key, value, ttl)

    def delete(self, key: str) -> bool:
        """
        Delete a key from the cache.

        Returns:
            True if key was deleted, False if not found
        """
        if key in self._cache:
            del self._cache[key]
            return True
        return False

    async def async_delete(self, key: str) -> bool:
        """Async version of delete."""
        async with self._lock:
            return self.delete(key)

    def delete_prefix(self, prefix: str) -> int:
        """
        Delete every key starting with ``prefix``.

        Returns:
            Number of entries removed
        """
        keys = [k for k in self._cache if k.startswith(prefix)]
        for key in keys:
            del self._cache[key]
        self._stats.invalidations += len(keys)
        return len(keys)

    async def async_delete_prefix(self, prefix: str) -> int:
        """Async version of delete_prefix."""
        async with self._lock:
            return self.delete_prefix(prefix)

    def clear(self) -> int:
        """
        Clear all entries from cache.

        Returns:
            Number of entries cleared
        """
        count = len(self._cache)
        self._cache.clear()
        return count

    async def async_clear(self) -> int:
        """Async version of clear."""
        async with self._lock:
            return self.clear()

    def cleanup_expired(self) -> int:
        """
        Remove all expired entries.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired_keys = [k for k, v in self._cache.items() if v.is_expired(now)]
        for key in expired_keys:
            del self._cache[key]
            self._stats.expirations += 1
        return len(expired_keys)

    def _evict_lru(self) -> None:
        """Evict least recently used entry."""
        if not self._cache:
            return

        lru_key = min(self._cache.keys(), key=lambda k: self._cache[k].last_accessed)
        del self._cache[lru_key]
        self._stats.evictions += 1
        logger.debug(f"Cache evicted LRU key {lru_key}")

    @property
    def stats(self) -> CacheStats:
        """Get cache statistics."""
        return self._stats

    @property
    def size(self) -> int:
        """Get current cache size."""
        return len(self._cache)

    def get_info(self) -> dict[str, Any]:
        """Get cache information."""
        return {
            "size": self.size,
            "max_size": self.max_size,
            "default_ttl": self.default_ttl,
            "stats": self._stats.to_dict(),
        }
