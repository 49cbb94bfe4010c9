"""
Cache management for Newsfeed.
"""
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Cache configuration
CACHE_TTL = 3600  # Cache provider responses for one hour
CHECK_PERIOD = 600  # Sweep expired entries at most every ten minutes

class CacheManager:
    """
    Process-local key/value cache with per-entry expiry.

    Provider responses are cached under keys such as
    ``newsapi_technology_en_10`` so repeated requests inside the TTL do
    not hit the network again.
    """
    def __init__(self, ttl: float = CACHE_TTL, check_period: float = CHECK_PERIOD,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            ttl: Default lifetime of an entry in seconds
            check_period: Minimum seconds between sweeps of expired entries
            clock: Monotonic time source, injectable for tests
        """
        self.ttl = ttl
        self.check_period = check_period
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._hits = 0
        self._misses = 0
        self._last_sweep = clock()

    def get(self, key: str) -> Optional[Any]:
        """
        Get a cached value if it exists and is fresh.

        Args:
            key: Cache key

        Returns:
            The cached value, or None if absent or expired
        """
        entry = self._entries.get(key)
        if entry is not None:
            value, expires_at = entry
            if self._clock() < expires_at:
                self._hits += 1
                logger.debug(f"Cache hit: {key}")
                return value
            # Clean up expired cache entry
            del self._entries[key]

        self._misses += 1
        logger.debug(f"Cache miss: {key}")
        return None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """
        Cache a value.

        Args:
            key: Cache key
            value: Value to store
            ttl: Lifetime override in seconds, defaults to the cache TTL
        """
        now = self._clock()
        lifetime = self.ttl if ttl is None else ttl
        self._entries[key] = (value, now + lifetime)

        if now - self._last_sweep >= self.check_period:
            self.purge_expired()

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def purge_expired(self) -> int:
        """
        Remove every expired entry.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        self._last_sweep = now
        if expired:
            logger.debug(f"Purged {len(expired)} expired cache entries")
        return len(expired)

    def keys(self) -> List[str]:
        """Keys of entries that have not expired yet."""
        now = self._clock()
        return [key for key, (_, expires_at) in self._entries.items() if now < expires_at]

    def clear(self) -> None:
        """Drop every entry. Hit/miss counters are kept."""
        self._entries.clear()

    def stats(self) -> Dict[str, int]:
        return {
            'keys': len(self.keys()),
            'hits': self._hits,
            'misses': self._misses,
        }
