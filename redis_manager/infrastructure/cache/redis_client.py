"""
Redis Backend with Connection Pooling

Architecture:
    RedisBackend (KeyValueBackend implementation)
        ├── ConnectionManager (Connection lifecycle)
        └── Command execution with uniform error translation

Every redis-py failure is logged with its command context and re-raised as
BackendCommandError, which the manager treats as transient.

The conditional write runs as one Lua script: SET with NX/XX and, only when
the SET applied, PEXPIRE. Running both steps server-side keeps them atomic
and leaves the TTL of a conflicting key untouched.
"""

import time
from collections.abc import Awaitable
from typing import Any, TypeVar

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool
from redis.commands.core import AsyncScript
from redis.exceptions import ConnectionError, RedisError, TimeoutError

from redis_manager.core.config.constants import SCAN_COUNT, SetMode, Stage
from redis_manager.core.config.settings import RedisSettings
from redis_manager.core.exceptions import BackendCommandError
from redis_manager.core.interfaces import BatchOutcome
from redis_manager.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# KEYS[1] = key, ARGV[1] = value, ARGV[2] = NX | XX | ALWAYS, ARGV[3] = expiry ms (0 = none)
# Returns {set_applied, expiry_applied} with expiry_applied = -1 when not attempted
CONDITIONAL_SET_SCRIPT = """
local ok
if ARGV[2] == 'NX' then
    ok = redis.call('SET', KEYS[1], ARGV[1], 'NX')
elseif ARGV[2] == 'XX' then
    ok = redis.call('SET', KEYS[1], ARGV[1], 'XX')
else
    ok = redis.call('SET', KEYS[1], ARGV[1])
end
if not ok then
    return {0, -1}
end
local expiry_ms = tonumber(ARGV[3])
if expiry_ms > 0 then
    return {1, redis.call('PEXPIRE', KEYS[1], expiry_ms)}
end
return {1, -1}
"""


# =============================================================================
# CONNECTION MANAGEMENT
# =============================================================================


class ConnectionManager:
    """
    Manages Redis connection lifecycle and pooling.

    Pool Configuration (from RedisSettings):
    - Max connections
    - Socket and connect timeouts
    - Health check interval
    - Retry on timeout: Enabled
    """

    def __init__(self, settings: RedisSettings):
        self._settings = settings
        self._pool: ConnectionPool | None = None
        self._client: redis.Redis | None = None
        self._is_connected = False

    async def connect(self) -> redis.Redis:
        """
        Establish connection to Redis with connection pooling.

        Raises:
            BackendCommandError: If connection fails
        """
        if self._is_connected and self._client:
            return self._client

        try:
            self._pool = ConnectionPool(
                host=self._settings.REDIS_HOST,
                port=self._settings.REDIS_PORT,
                db=self._settings.REDIS_DB,
                password=self._settings.REDIS_PASSWORD,
                max_connections=self._settings.REDIS_MAX_CONNECTIONS,
                socket_connect_timeout=self._settings.REDIS_SOCKET_CONNECT_TIMEOUT,
                socket_timeout=self._settings.REDIS_SOCKET_TIMEOUT,
                retry_on_timeout=True,
                health_check_interval=self._settings.REDIS_HEALTH_CHECK_INTERVAL,
                decode_responses=True,  # Return strings instead of bytes
            )
            self._client = redis.Redis(connection_pool=self._pool)

            # Verify connection with ping
            await self._client.ping()

            self._is_connected = True

            logger.info(
                "Redis connected successfully",
                stage=Stage.REDIS_CONNECT,
                host=self._settings.REDIS_HOST,
                port=self._settings.REDIS_PORT,
                max_connections=self._settings.REDIS_MAX_CONNECTIONS,
            )

            return self._client

        except (ConnectionError, TimeoutError) as e:
            logger.error("Failed to connect to Redis", stage=Stage.REDIS_CONNECT, error=str(e))
            raise BackendCommandError(
                f"Failed to connect to Redis: {e}",
                command="PING",
                details={"host": self._settings.REDIS_HOST, "port": self._settings.REDIS_PORT},
            ) from e

    async def disconnect(self) -> None:
        """Close Redis connection and pool."""
        if self._client:
            await self._client.aclose()

        if self._pool:
            await self._pool.disconnect()

        self._is_connected = False

        logger.info("Redis disconnected", stage=Stage.REDIS_DISCONNECT)

    def get_client(self) -> redis.Redis | None:
        return self._client

    def get_pool(self) -> ConnectionPool | None:
        return self._pool

    def is_connected(self) -> bool:
        return self._is_connected


# =============================================================================
# BACKEND
# =============================================================================


class RedisBackend:
    """
    KeyValueBackend implemented on redis.asyncio.

    Usage:
        backend = RedisBackend(settings=get_settings().redis)
        await backend.connect()
        outcome = await backend.conditional_set("ns:a", '"v"', SetMode.NX, 60_000)
        await backend.disconnect()

    An already-configured ``redis.asyncio.Redis`` may be injected instead,
    in which case connect() only verifies it with PING.
    """

    def __init__(self, client: redis.Redis | None = None, settings: RedisSettings | None = None):
        self._connection = ConnectionManager(settings or RedisSettings())
        self._client: redis.Redis | None = client
        self._conditional_set: AsyncScript | None = None

    @property
    def client(self) -> redis.Redis | None:
        return self._client

    async def connect(self) -> None:
        if self._client is not None:
            await self._execute("PING", self._client.ping())
            return
        self._client = await self._connection.connect()

    async def disconnect(self) -> None:
        if self._connection.is_connected():
            await self._connection.disconnect()
        elif self._client is not None:
            await self._client.aclose()
        self._client = None
        self._conditional_set = None

    async def ping(self) -> bool:
        """
        Check Redis connection health.

        Returns:
            True if healthy, False otherwise
        """
        try:
            if self._client:
                await self._client.ping()
                return True
        except (ConnectionError, TimeoutError):
            pass
        return False

    # -------------------------------------------------------------------------
    # Command execution
    # -------------------------------------------------------------------------

    def _require_client(self, command: str) -> redis.Redis:
        if self._client is None:
            raise BackendCommandError("Redis backend is not connected", command=command)
        return self._client

    async def _execute(self, command: str, awaitable: Awaitable[T], **context: Any) -> T:
        try:
            return await awaitable
        except RedisError as e:
            logger.error(f"Redis {command} failed", stage=Stage.REDIS_COMMAND, error=str(e), **context)
            raise BackendCommandError(
                f"Redis {command} failed: {e}", command=command, details=context
            ) from e

    # -------------------------------------------------------------------------
    # KeyValueBackend
    # -------------------------------------------------------------------------

    async def exists(self, key: str) -> bool:
        client = self._require_client("EXISTS")
        return await self._execute("EXISTS", client.exists(key), key=key) == 1

    async def get(self, key: str) -> str | bytes | None:
        client = self._require_client("GET")
        return await self._execute("GET", client.get(key), key=key)

    async def conditional_set(
        self,
        key: str,
        value: str,
        mode: SetMode,
        expiry_ms: int | None = None,
    ) -> BatchOutcome:
        """
        Atomically SET under ``mode`` and PEXPIRE when the SET applied.

        Returns:
            BatchOutcome with per-step results
        """
        client = self._require_client("EVALSHA")
        if self._conditional_set is None:
            self._conditional_set = client.register_script(CONDITIONAL_SET_SCRIPT)

        result = await self._execute(
            "EVALSHA",
            self._conditional_set(keys=[key], args=[value, SetMode(mode).value, expiry_ms or 0]),
            key=key,
            mode=SetMode(mode).value,
        )
        set_applied, expiry_result = int(result[0]), int(result[1])
        if expiry_ms is None or not set_applied:
            return BatchOutcome(set_applied=bool(set_applied), expiry_applied=None)
        return BatchOutcome(set_applied=True, expiry_applied=expiry_result == 1)

    async def delete(self, key: str) -> int:
        client = self._require_client("DEL")
        return await self._execute("DEL", client.delete(key), key=key)

    async def scan(self, pattern: str) -> list[str]:
        client = self._require_client("SCAN")

        async def collect() -> list[str]:
            return [key async for key in client.scan_iter(match=pattern, count=SCAN_COUNT)]

        return await self._execute("SCAN", collect(), pattern=pattern)

    async def flush_namespace(self, pattern: str) -> int:
        """
        Delete every key matching ``pattern`` with SCAN + UNLINK.

        Keys written while the scan is running may survive.
        """
        client = self._require_client("UNLINK")

        async def unlink_matching() -> int:
            removed = 0
            batch: list[str] = []
            async for key in client.scan_iter(match=pattern, count=SCAN_COUNT):
                batch.append(key)
                if len(batch) >= SCAN_COUNT:
                    removed += await client.unlink(*batch)
                    batch.clear()
            if batch:
                removed += await client.unlink(*batch)
            return removed

        return await self._execute("UNLINK", unlink_matching(), pattern=pattern)

    async def flush_all(self) -> None:
        client = self._require_client("FLUSHDB")
        await self._execute("FLUSHDB", client.flushdb())

    # -------------------------------------------------------------------------
    # Health Check
    # -------------------------------------------------------------------------

    async def health_check(self) -> dict[str, Any]:
        """
        Perform health check on the Redis connection.

        Returns:
            Dict with health status, ping latency and pool size
        """
        health: dict[str, Any] = {
            "status": "healthy",
            "connected": self._client is not None,
            "pool_size": 0,
            "ping_latency_ms": None,
        }

        if self._client is None:
            health["status"] = "not_connected"
            return health

        try:
            start = time.perf_counter()
            await self._client.ping()
            health["ping_latency_ms"] = round((time.perf_counter() - start) * 1000, 2)

            pool = self._connection.get_pool()
            if pool:
                health["pool_size"] = pool.max_connections

        except RedisError as e:
            health["status"] = "unhealthy"
            health["error"] = str(e)

        return health
