"""
TTL cache for catalog snapshots and corrected queries.
Supports Redis (if REDIS_URL set) with in-memory fallback.

Values must be JSON-serializable so both backends behave the same.
"""
import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

import redis

from .settings import settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "gem_finder:"


class InMemoryCache:
    """In-memory storage with per-key expiry."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._store: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        """Return cached value if present and not expired, else None."""
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return None
            value, expires_at = item
            if self._clock() >= expires_at:
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: float) -> None:
        with self._lock:
            self._store[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def cleanup_stale(self) -> None:
        """Remove expired entries."""
        now = self._clock()
        with self._lock:
            stale = [k for k, (_, expires_at) in self._store.items() if now >= expires_at]
            for key in stale:
                logger.debug(f"Cleaning up stale cache entry: {key}")
                del self._store[key]

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


class RedisCache:
    """Redis-backed storage."""

    def __init__(self, redis_client, prefix: str = KEY_PREFIX):
        self.redis = redis_client
        self.prefix = prefix

    # outages after startup are logged and read as misses

    def get(self, key: str) -> Optional[Any]:
        try:
            data = self.redis.get(self.prefix + key)
        except redis.RedisError as e:
            logger.warning(f"Redis get failed for {key}, treating as miss: {e}")
            return None
        if data:
            return json.loads(data)
        return None

    def set(self, key: str, value: Any, ttl: float) -> None:
        try:
            self.redis.setex(self.prefix + key, max(int(ttl), 1), json.dumps(value))
        except redis.RedisError as e:
            logger.warning(f"Redis set failed for {key}, value not cached: {e}")

    def delete(self, key: str) -> None:
        try:
            self.redis.delete(self.prefix + key)
        except redis.RedisError as e:
            logger.warning(f"Redis delete failed for {key}: {e}")

    def cleanup_stale(self) -> None:
        """Redis handles TTL automatically."""
        pass

    def clear(self) -> None:
        for key in self.redis.scan_iter(match=f"{self.prefix}*"):
            self.redis.delete(key)


# === Global Cache Instance ===
_cache: Optional[InMemoryCache | RedisCache] = None


def get_cache() -> InMemoryCache | RedisCache:
    """Get or initialize the global cache instance."""
    global _cache

    if _cache is not None:
        return _cache

    # Try Redis first
    if settings.REDIS_URL:
        try:
            client = redis.from_url(settings.REDIS_URL, decode_responses=True)
            client.ping()  # Test connection
            _cache = RedisCache(client)
            logger.info(f"Using Redis cache: {settings.REDIS_URL}")
            return _cache
        except redis.RedisError as e:
            logger.warning(f"Redis connection failed, falling back to in-memory: {e}")

    _cache = InMemoryCache()
    logger.info("Using in-memory cache")
    return _cache


def set_cache(cache: Optional[InMemoryCache | RedisCache]) -> None:
    """Replace the global cache (None resets it)."""
    global _cache
    _cache = cache
