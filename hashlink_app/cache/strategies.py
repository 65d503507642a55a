"""
Cache strategies using Strategy Pattern.
Allows switching between different cache backends (Redis, In-Memory, Null).
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

import redis

logger = logging.getLogger(__name__)


class CacheStrategy(ABC):
    """
    Interface every cache backend implements.

    Methods are async so a network-backed cache can be swapped in
    without touching the service layer.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the cached value, or None on a miss"""

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        """Store a value for ttl seconds"""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a key; True if it was there"""

    @abstractmethod
    async def clear(self) -> bool:
        """Drop every entry"""


class RedisCache(CacheStrategy):
    """
    Redis-backed cache shared by every app process.

    Cache failures are logged and treated as misses: the database stays
    the source of truth, so a Redis outage only costs latency.
    """

    def __init__(self, redis_client):
        self.redis = redis_client

    async def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(key)
        except redis.RedisError as e:
            logger.warning("Redis get failed for %s: %s", key, e)
            return None
        return value.decode("utf-8") if value else None

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        try:
            return bool(self.redis.setex(key, ttl, value))
        except redis.RedisError as e:
            logger.warning("Redis set failed for %s: %s", key, e)
            return False

    async def delete(self, key: str) -> bool:
        try:
            return bool(self.redis.delete(key))
        except redis.RedisError as e:
            logger.warning("Redis delete failed for %s: %s", key, e)
            return False

    async def clear(self) -> bool:
        try:
            self.redis.flushdb()
            return True
        except redis.RedisError as e:
            logger.warning("Redis clear failed: %s", e)
            return False


class InMemoryCache(CacheStrategy):
    """
    Process-local dict cache with lazy TTL expiry.

    Good for development and tests; not shared between processes.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        self._entries[key] = (value, self._clock() + ttl)
        return True

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def clear(self) -> bool:
        self._entries.clear()
        return True


class NullCache(CacheStrategy):
    """Null Object Pattern - every read is a miss, every write a no-op."""

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        return True

    async def delete(self, key: str) -> bool:
        return False

    async def clear(self) -> bool:
        return True
