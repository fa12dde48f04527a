"""
Run Guard - optional Redis lock around batch workflows

Without Redis every acquire succeeds, so overlapping scheduled and manual
runs are not prevented. With Redis a SET NX EX key per workflow rejects a run
while another one holds the lock; the expiry frees locks left by crashed runs.
If Redis fails while the lock is taken or freed, the failure is logged and
the run goes ahead unlocked.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import redis.asyncio as redis

from ladderbot.config import Config
from ladderbot.utils.redis_utils import RedisUtils

logger = logging.getLogger(__name__)

LOCK_KEY_PREFIX = "ladder_batch_lock"


class RunGuard:
    """Per-workflow run lock."""

    def __init__(self, redis_client=None, ttl_seconds: Optional[int] = None):
        self.redis_client = redis_client
        self.ttl_seconds = ttl_seconds or Config.RUN_LOCK_TTL_SECONDS

    @classmethod
    async def create(cls) -> "RunGuard":
        """Build a guard backed by Redis when REDIS_URL is configured."""
        client = await RedisUtils.create_redis_client()
        if client is None:
            logger.info("Redis not configured. Batch runs will not be locked.")
        return cls(client)

    @property
    def enabled(self) -> bool:
        return self.redis_client is not None

    @staticmethod
    def lock_key(workflow: str) -> str:
        return f"{LOCK_KEY_PREFIX}:{workflow}"

    async def acquire(self, workflow: str) -> bool:
        """
        Try to take the lock for workflow.

        Raises:
            redis.RedisError: If Redis cannot be reached
        """
        if not self.enabled:
            return True

        is_locked = await self.redis_client.set(self.lock_key(workflow), "1", ex=self.ttl_seconds, nx=True)
        if not is_locked:
            logger.info(f"Run of {workflow} throttled - lock exists")
        return bool(is_locked)

    async def release(self, workflow: str) -> None:
        """Free the lock for workflow; a Redis failure is only logged."""
        if not self.enabled:
            return
        try:
            await self.redis_client.delete(self.lock_key(workflow))
        except redis.RedisError as e:
            # The key still expires after ttl_seconds
            logger.error(f"Failed to release run lock for {workflow}: {e}")

    @asynccontextmanager
    async def hold(self, workflow: str) -> AsyncIterator[bool]:
        """
        Yield whether the run may proceed; release the lock on exit if taken.

        A lock that cannot be taken because Redis is down yields True without
        being owned, so nothing is deleted afterwards.
        """
        owned = False
        try:
            owned = await self.acquire(workflow)
            proceed = owned
        except redis.RedisError as e:
            logger.error(f"Run lock for {workflow} unavailable, running unlocked: {e}")
            proceed = True

        try:
            yield proceed
        finally:
            if owned:
                await self.release(workflow)

    async def close(self) -> None:
        if self.enabled:
            await self.redis_client.aclose()
