"""Tests for the Redis redirect cache."""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from lib.database.cache import RedirectCache


class FakeRedis:
    """Minimal async Redis client holding keys in a dict."""

    def __init__(self, fail=False):
        self.data = {}
        self.ttls = {}
        self.fail = fail
        self.closed = False

    def _check(self):
        if self.fail:
            raise RedisConnectionError("connection refused")

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        self._check()
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, key):
        self._check()
        return 1 if self.data.pop(key, None) is not None else 0

    async def ping(self):
        self._check()
        return True

    async def aclose(self):
        self.closed = True


def make_cache(client, ttl_seconds=60):
    cache = RedirectCache(redis_url="redis://localhost:6379/0", ttl_seconds=ttl_seconds)
    cache.client = client
    return cache


@pytest.mark.asyncio
class TestRedirectCache:
    """Test cache behaviour against a fake client."""

    async def test_remember_and_get(self):
        client = FakeRedis()
        cache = make_cache(client, ttl_seconds=120)

        assert await cache.remember("abc", "https://example.com") is True
        assert await cache.get_target("abc") == "https://example.com"
        assert client.ttls["shortlink:url:abc"] == 120

    async def test_miss(self):
        cache = make_cache(FakeRedis())

        assert await cache.get_target("missing") is None

    async def test_forget(self):
        cache = make_cache(FakeRedis())
        await cache.remember("abc", "https://example.com")

        assert await cache.forget("abc") is True
        assert await cache.forget("abc") is False
        assert await cache.get_target("abc") is None

    async def test_errors_are_treated_as_misses(self):
        cache = make_cache(FakeRedis(fail=True))

        assert await cache.get_target("abc") is None
        assert await cache.remember("abc", "https://example.com") is False
        assert await cache.forget("abc") is False
        assert await cache.ping() is False

    async def test_disabled_without_url(self):
        cache = RedirectCache(redis_url=None)
        await cache.connect()

        assert not cache.active
        assert await cache.get_target("abc") is None
        assert await cache.remember("abc", "https://example.com") is False

    async def test_close(self):
        client = FakeRedis()
        cache = make_cache(client)

        await cache.close()
        assert client.closed
        assert cache.client is None
        assert not cache.active
