"""
Factory for creating cache instances.
"""

import logging
from enum import Enum

import redis

from .strategies import CacheStrategy, RedisCache, InMemoryCache, NullCache
from hashlink_app.config import settings

logger = logging.getLogger(__name__)


class CacheBackend(Enum):
    """Available cache backends"""
    REDIS = "redis"
    MEMORY = "memory"
    NULL = "null"


class CacheFactory:
    """
    Builds the configured cache once and hands out the same instance.

    A Redis backend that can't be reached at startup falls back to the
    in-memory cache.
    """

    _instance: CacheStrategy = None

    @classmethod
    def create(cls, backend: CacheBackend) -> CacheStrategy:
        if cls._instance is not None:
            return cls._instance

        if backend == CacheBackend.REDIS:
            try:
                client = redis.from_url(
                    settings.redis_url,
                    decode_responses=False,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                client.ping()
                cls._instance = RedisCache(client)
                logger.info("Redis cache initialized at %s", settings.redis_url)
            except redis.RedisError as e:
                logger.warning("Redis connection failed (%s), using in-memory cache", e)
                cls._instance = InMemoryCache()

        elif backend == CacheBackend.MEMORY:
            cls._instance = InMemoryCache()
            logger.info("In-memory cache initialized")

        elif backend == CacheBackend.NULL:
            cls._instance = NullCache()
            logger.info("Null cache initialized")

        else:
            raise ValueError(f"Unknown cache backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Forget the cached instance (for testing)"""
        cls._instance = None
