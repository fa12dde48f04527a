from unittest.mock import AsyncMock, patch

import pytest
import redis.asyncio as redis

from ladderbot.services.run_guard import RunGuard


class TestDisabledGuard:
    @pytest.mark.asyncio
    async def test_always_acquires(self):
        guard = RunGuard()
        assert guard.enabled is False
        assert await guard.acquire("daily_settlement") is True
        async with guard.hold("daily_settlement") as acquired:
            assert acquired is True
        await guard.close()

    @pytest.mark.asyncio
    async def test_create_without_redis(self):
        with patch("ladderbot.services.run_guard.RedisUtils.create_redis_client",
                   AsyncMock(return_value=None)):
            guard = await RunGuard.create()
        assert guard.enabled is False


class TestRedisGuard:
    @pytest.mark.asyncio
    async def test_acquire_uses_set_nx_with_expiry(self):
        redis_client = AsyncMock()
        redis_client.set.return_value = True
        guard = RunGuard(redis_client, ttl_seconds=120)

        assert await guard.acquire("monthly_archive") is True

        redis_client.set.assert_awaited_once_with(
            "ladder_batch_lock:monthly_archive", "1", ex=120, nx=True
        )

    @pytest.mark.asyncio
    async def test_acquire_fails_when_key_exists(self):
        redis_client = AsyncMock()
        redis_client.set.return_value = None
        assert await RunGuard(redis_client, ttl_seconds=120).acquire("monthly_archive") is False

    @pytest.mark.asyncio
    async def test_hold_releases_only_taken_lock(self):
        redis_client = AsyncMock()
        redis_client.set.return_value = None
        guard = RunGuard(redis_client, ttl_seconds=120)

        async with guard.hold("daily_settlement") as acquired:
            assert acquired is False

        redis_client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_hold_releases_on_exception(self):
        redis_client = AsyncMock()
        redis_client.set.return_value = True
        guard = RunGuard(redis_client, ttl_seconds=120)

        with pytest.raises(RuntimeError):
            async with guard.hold("daily_settlement"):
                raise RuntimeError("boom")

        redis_client.delete.assert_awaited_once_with("ladder_batch_lock:daily_settlement")

    @pytest.mark.asyncio
    async def test_close(self):
        redis_client = AsyncMock()
        await RunGuard(redis_client, ttl_seconds=120).close()
        redis_client.aclose.assert_awaited_once()


class TestRedisOutage:
    @pytest.mark.asyncio
    async def test_hold_proceeds_without_owning_the_lock(self):
        redis_client = AsyncMock()
        redis_client.set.side_effect = redis.ConnectionError("redis down")
        guard = RunGuard(redis_client, ttl_seconds=120)

        async with guard.hold("daily_settlement") as acquired:
            assert acquired is True

        redis_client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_acquire_reports_the_outage(self):
        redis_client = AsyncMock()
        redis_client.set.side_effect = redis.ConnectionError("redis down")

        with pytest.raises(redis.RedisError):
            await RunGuard(redis_client, ttl_seconds=120).acquire("daily_settlement")

    @pytest.mark.asyncio
    async def test_release_failure_is_logged_only(self):
        redis_client = AsyncMock()
        redis_client.delete.side_effect = redis.ConnectionError("redis down")

        await RunGuard(redis_client, ttl_seconds=120).release("monthly_archive")

        redis_client.delete.assert_awaited_once_with("ladder_batch_lock:monthly_archive")
