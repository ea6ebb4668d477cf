"""
Manager Factory

Builds a RedisManager from pydantic-settings, wiring the Redis backend and,
when MANAGER_LOCKING_ENABLED is set, the Redis lock provider on the same
connection pool.
"""

from redis_manager.core.config.settings import Settings, get_settings
from redis_manager.core.interfaces import KeyValueBackend, LockProvider
from redis_manager.core.logging import get_logger
from redis_manager.infrastructure.cache import RedisBackend
from redis_manager.infrastructure.lock import RedisLockProvider
from redis_manager.manager import LockingManagerConfig, ManagerConfig, RedisManager

logger = get_logger(__name__)


async def create_manager(
    settings: Settings | None = None,
    *,
    backend: KeyValueBackend | None = None,
    lock_provider: LockProvider | None = None,
) -> RedisManager:
    """
    Create a manager from settings.

    Args:
        settings: Settings to read; defaults to get_settings()
        backend: Backend to use instead of a new, connected RedisBackend
        lock_provider: Lock provider to use instead of a RedisLockProvider

    Raises:
        BackendCommandError: The Redis backend could not connect
        ValueError: Locking is enabled with an injected non-Redis backend and
            no lock provider
    """
    settings = settings or get_settings()
    manager_settings = settings.manager

    if backend is None:
        backend = RedisBackend(settings=settings.redis)
        await backend.connect()

    common = {
        "backend": backend,
        "namespace": manager_settings.MANAGER_NAMESPACE,
        "default_expiry_ms": manager_settings.MANAGER_DEFAULT_EXPIRY_MS,
        "max_retries": manager_settings.MANAGER_MAX_RETRIES,
    }

    if not manager_settings.MANAGER_LOCKING_ENABLED:
        config: ManagerConfig = ManagerConfig(**common)
    else:
        if lock_provider is None:
            if not isinstance(backend, RedisBackend) or backend.client is None:
                raise ValueError("A lock_provider is required when locking is enabled with a custom backend")
            lock_provider = RedisLockProvider(backend.client, settings.lock)
        config = LockingManagerConfig(
            **common,
            lock_provider=lock_provider,
            default_lock_ttl_ms=manager_settings.MANAGER_DEFAULT_LOCK_TTL_MS,
        )

    logger.info(
        "Manager created",
        namespace=config.namespace,
        locking_enabled=manager_settings.MANAGER_LOCKING_ENABLED,
        default_expiry_ms=config.default_expiry_ms,
        max_retries=config.max_retries,
    )
    return RedisManager(config)
