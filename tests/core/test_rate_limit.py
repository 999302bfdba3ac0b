"""
Tests for rate limiting.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from scholarstream.core import rate_limit
from scholarstream.core.rate_limit import RateLimitExceeded, check_rate_limit, enforce_rate_limit


@pytest.fixture(autouse=True)
def clear_memory_store():
    rate_limit._memory_store.clear()
    yield
    rate_limit._memory_store.clear()


@pytest.fixture
def no_redis():
    with patch.object(rate_limit.redis_store, "get_redis", return_value=None):
        yield


@pytest.mark.asyncio
async def test_memory_fallback_allows_up_to_limit(no_redis):
    results = [await check_rate_limit("k", limit=3, window_seconds=60) for _ in range(4)]

    assert results == [True, True, True, False]


@pytest.mark.asyncio
async def test_keys_are_independent(no_redis):
    assert await check_rate_limit("a", limit=1, window_seconds=60) is True
    assert await check_rate_limit("b", limit=1, window_seconds=60) is True
    assert await check_rate_limit("a", limit=1, window_seconds=60) is False


@pytest.mark.asyncio
async def test_enforce_raises_429(no_redis):
    await enforce_rate_limit("k", limit=1, window_seconds=30)

    with pytest.raises(RateLimitExceeded) as exc_info:
        await enforce_rate_limit("k", limit=1, window_seconds=30)

    assert exc_info.value.status_code == 429
    assert exc_info.value.error_code == "RATE_LIMIT_EXCEEDED"
    assert exc_info.value.headers == {"Retry-After": "30"}


@pytest.mark.asyncio
async def test_redis_failure_falls_back_to_memory():
    client = MagicMock()
    pipe = MagicMock()
    pipe.execute = AsyncMock(side_effect=ConnectionError("redis down"))
    client.pipeline.return_value = pipe

    with patch.object(rate_limit.redis_store, "get_redis", return_value=client):
        assert await check_rate_limit("k", limit=1, window_seconds=60) is True

    assert "k" in rate_limit._memory_store


@pytest.mark.asyncio
async def test_redis_count_is_used_when_available():
    client = MagicMock()
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[0, 5, 1, True])
    client.pipeline.return_value = pipe

    with patch.object(rate_limit.redis_store, "get_redis", return_value=client):
        assert await check_rate_limit("k", limit=5, window_seconds=60) is False
