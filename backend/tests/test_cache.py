"""The cache helpers must fail open when Redis is unreachable."""

from unittest.mock import AsyncMock, patch

import pytest

from bureauto.core import cache


@pytest.fixture
def broken_redis():
    redis = AsyncMock()
    redis.get.side_effect = ConnectionError("redis down")
    redis.set.side_effect = ConnectionError("redis down")
    redis.delete.side_effect = ConnectionError("redis down")
    with patch("bureauto.core.cache._get_redis", AsyncMock(return_value=redis)):
        yield redis


def test_make_cache_key():
    assert cache.make_cache_key("advertisements", "filters") == (
        "cache:advertisements:filters"
    )


@pytest.mark.asyncio
async def test_get_returns_miss(broken_redis):
    assert await cache.cache_get("cache:x") is None


@pytest.mark.asyncio
async def test_set_and_delete_do_not_raise(broken_redis):
    await cache.cache_set("cache:x", "1", ttl=5)
    await cache.cache_delete("cache:x")
    broken_redis.set.assert_awaited_once_with("cache:x", "1", ex=5)


@pytest.mark.asyncio
async def test_round_trip_through_client():
    redis = AsyncMock()
    redis.get.return_value = '{"brand": {"brands": []}}'
    with patch("bureauto.core.cache._get_redis", AsyncMock(return_value=redis)):
        assert await cache.cache_get("cache:x") == '{"brand": {"brands": []}}'
