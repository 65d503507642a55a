"""
Tests for cache strategies and the cache factory.
"""
import asyncio

import redis

from hashlink_app.cache.factory import CacheBackend, CacheFactory
from hashlink_app.cache.strategies import InMemoryCache, NullCache, RedisCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class BrokenRedis:
    """Redis client whose every call fails"""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise redis.ConnectionError("connection refused")
        return fail


class TestInMemoryCache:
    """Test the process-local cache"""

    def test_set_get_delete(self):
        """Test basic operations"""
        cache = InMemoryCache()

        assert asyncio.run(cache.set("k", "v")) is True
        assert asyncio.run(cache.get("k")) == "v"
        assert asyncio.run(cache.delete("k")) is True
        assert asyncio.run(cache.get("k")) is None
        assert asyncio.run(cache.delete("k")) is False

    def test_entries_expire(self):
        """Test entries are dropped once their TTL passes"""
        clock = FakeClock()
        cache = InMemoryCache(clock=clock)
        asyncio.run(cache.set("k", "v", ttl=10))

        clock.now = 9.9
        assert asyncio.run(cache.get("k")) == "v"

        clock.now = 10
        assert asyncio.run(cache.get("k")) is None

    def test_clear(self):
        """Test clear empties the cache"""
        cache = InMemoryCache()
        asyncio.run(cache.set("a", "1"))
        asyncio.run(cache.set("b", "2"))

        asyncio.run(cache.clear())

        assert asyncio.run(cache.get("a")) is None
        assert asyncio.run(cache.get("b")) is None


class TestNullCache:
    """Test the do-nothing cache"""

    def test_always_misses(self):
        """Test writes are accepted but nothing is ever returned"""
        cache = NullCache()
        assert asyncio.run(cache.set("k", "v")) is True
        assert asyncio.run(cache.get("k")) is None


class TestRedisCache:
    """Test Redis failures degrade to cache misses"""

    def test_errors_are_misses(self):
        """Test a failing Redis never breaks a lookup"""
        cache = RedisCache(BrokenRedis())

        assert asyncio.run(cache.get("k")) is None
        assert asyncio.run(cache.set("k", "v")) is False
        assert asyncio.run(cache.delete("k")) is False
        assert asyncio.run(cache.clear()) is False


class TestCacheFactory:
    """Test cache factory"""

    def setup_method(self):
        CacheFactory.clear_instance()

    def teardown_method(self):
        CacheFactory.clear_instance()

    def test_creates_memory_cache(self):
        """Test factory creates in-memory cache"""
        assert isinstance(CacheFactory.create(CacheBackend.MEMORY), InMemoryCache)

    def test_creates_null_cache(self):
        """Test factory creates null cache"""
        assert isinstance(CacheFactory.create(CacheBackend.NULL), NullCache)

    def test_reuses_instance(self):
        """Test the first created cache is handed out again"""
        first = CacheFactory.create(CacheBackend.MEMORY)
        assert CacheFactory.create(CacheBackend.NULL) is first

    def test_unreachable_redis_falls_back_to_memory(self, monkeypatch):
        """Test a Redis that can't be reached falls back to in-memory cache"""
        monkeypatch.setattr(redis, "from_url", lambda *args, **kwargs: BrokenRedis())
        assert isinstance(CacheFactory.create(CacheBackend.REDIS), InMemoryCache)
