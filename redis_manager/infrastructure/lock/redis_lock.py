"""
Redis Distributed Lock Provider

LockProvider implemented on redis-py's ``Lock`` (SET NX PX with a random
token, token-checked release). One lock is taken per resource, in sorted
order so that two callers locking overlapping sets cannot deadlock.

Acquisition polls every LOCK_RETRY_DELAY_MS until the blocking timeout
derived from LOCK_RETRY_COUNT elapses. A partially acquired set is released
before the failure propagates.
"""

from collections.abc import Sequence

import redis.asyncio as redis
from redis.asyncio.lock import Lock
from redis.exceptions import LockError, RedisError

from redis_manager.core.config.constants import Stage
from redis_manager.core.config.settings import LockProviderSettings
from redis_manager.core.logging import get_logger

logger = get_logger(__name__)


class RedisLockHandle:
    """Locks held for one manager operation."""

    def __init__(self, locks: list[Lock]):
        self._locks = locks

    @property
    def resources(self) -> list[str]:
        return [lock.name for lock in self._locks]

    async def _release_all(self) -> list[RedisError]:
        failures: list[RedisError] = []
        for lock in reversed(self._locks):
            try:
                await lock.release()
            except RedisError as e:
                logger.warning("Lock release failed", stage=Stage.LOCK_RELEASE, resource=lock.name, error=str(e))
                failures.append(e)
        return failures

    async def release(self) -> None:
        """
        Release every held lock, in reverse acquisition order.

        All locks are attempted even if one fails; the first failure is
        raised afterwards.

        Raises:
            LockError: A lock had already expired or was taken over
            RedisError: Communication failure while releasing
        """
        failures = await self._release_all()
        if failures:
            raise failures[0]

    async def rollback(self) -> None:
        """Release after a failed acquisition; failures are logged and the acquisition error propagates."""
        await self._release_all()


class RedisLockProvider:
    """
    Acquires TTL-bounded locks over named Redis resources.

    Usage:
        provider = RedisLockProvider(client, get_settings().lock)
        handle = await provider.acquire(["lock:ns:a"], ttl_ms=5000)
        try:
            ...
        finally:
            await handle.release()
    """

    def __init__(self, client: redis.Redis, settings: LockProviderSettings | None = None):
        self._client = client
        self._settings = settings or LockProviderSettings()

    async def acquire(self, resources: Sequence[str], ttl_ms: int) -> RedisLockHandle:
        """
        Acquire every resource or none.

        Raises:
            LockError: A resource could not be acquired within the blocking timeout
            RedisError: Communication failure while acquiring
        """
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be positive")

        held: list[Lock] = []
        try:
            for resource in sorted(set(resources)):
                lock = self._client.lock(
                    resource,
                    timeout=ttl_ms / 1000,
                    sleep=self._settings.sleep_s,
                    blocking=True,
                    blocking_timeout=self._settings.blocking_timeout_s,
                    thread_local=False,
                )
                if not await lock.acquire():
                    raise LockError(f"Could not acquire lock {resource!r} within {self._settings.blocking_timeout_s}s")
                held.append(lock)
        except BaseException:
            await RedisLockHandle(held).rollback()
            raise

        logger.debug("Locks acquired", stage=Stage.LOCK_ACQUIRE, resources=[lock.name for lock in held], ttl_ms=ttl_ms)
        return RedisLockHandle(held)
