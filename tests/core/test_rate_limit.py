"""
Tests for rate limiting.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.rate_limit import _check_rate_limit_memory, check_rate_limit


class TestMemoryRateLimit:
    def test_allows_up_to_limit(self):
        results = [_check_rate_limit_memory("k", limit=3, window_seconds=60) for _ in range(4)]

        assert results == [True, True, True, False]

    def test_keys_are_independent(self):
        assert _check_rate_limit_memory("a", limit=1, window_seconds=60)
        assert _check_rate_limit_memory("b", limit=1, window_seconds=60)
        assert not _check_rate_limit_memory("a", limit=1, window_seconds=60)


class TestCheckRateLimit:
    @pytest.mark.asyncio
    async def test_uses_redis_when_available(self):
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[0, 5, 1, True])
        client = MagicMock()
        client.pipeline.return_value = pipe

        with patch("app.core.rate_limit.redis_module.redis_client", client):
            assert not await check_rate_limit("admin:x:1", limit=5, window_seconds=60)

        pipe.zadd.assert_called_once()

    @pytest.mark.asyncio
    async def test_falls_back_to_memory_on_redis_error(self):
        pipe = MagicMock()
        pipe.execute = AsyncMock(side_effect=RedisConnectionError("down"))
        client = MagicMock()
        client.pipeline.return_value = pipe

        with patch("app.core.rate_limit.redis_module.redis_client", client):
            assert await check_rate_limit("admin:y:1", limit=1, window_seconds=60)
            assert not await check_rate_limit("admin:y:1", limit=1, window_seconds=60)
