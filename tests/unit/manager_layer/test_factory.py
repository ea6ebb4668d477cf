"""
Unit Tests for create_manager()

Tests configuration shape selection and wiring from settings.
"""

import os
from unittest.mock import AsyncMock, patch

import pytest

from redis_manager.core.config.settings import Settings
from redis_manager.factory import create_manager
from redis_manager.infrastructure.cache import RedisBackend
from redis_manager.infrastructure.lock import RedisLockProvider
from redis_manager.manager import LockingManagerConfig, ManagerConfig


def make_settings(**env):
    with patch.dict(os.environ, {key: str(value) for key, value in env.items()}, clear=True):
        return Settings(_env_file=None)


@pytest.mark.unit
class TestCreateManager:
    """Test create_manager()."""

    @pytest.mark.asyncio
    async def test_non_locking_shape(self, backend):
        settings = make_settings(
            MANAGER_NAMESPACE="sessions",
            MANAGER_LOCKING_ENABLED="false",
            MANAGER_DEFAULT_EXPIRY_MS=1000,
            MANAGER_MAX_RETRIES=2,
        )

        manager = await create_manager(settings, backend=backend)

        assert type(manager.config) is ManagerConfig
        assert manager.namespace == "sessions"
        assert manager.default_expiry_ms == 1000
        assert manager.max_retries == 2
        assert manager.locking_enabled is False

    @pytest.mark.asyncio
    async def test_locking_shape_with_injected_provider(self, backend, lock_provider):
        settings = make_settings(MANAGER_LOCKING_ENABLED="true", MANAGER_DEFAULT_LOCK_TTL_MS=750)

        manager = await create_manager(settings, backend=backend, lock_provider=lock_provider)

        assert isinstance(manager.config, LockingManagerConfig)
        assert manager.config.lock_provider is lock_provider
        assert manager.config.default_lock_ttl_ms == 750

        await manager.add("a", 1)
        assert lock_provider.acquired[0][1] == 750

    @pytest.mark.asyncio
    async def test_locking_with_custom_backend_requires_provider(self, backend):
        settings = make_settings(MANAGER_LOCKING_ENABLED="true")

        with pytest.raises(ValueError):
            await create_manager(settings, backend=backend)

    @pytest.mark.asyncio
    async def test_redis_lock_provider_shares_client(self, mock_redis_client):
        settings = make_settings(MANAGER_LOCKING_ENABLED="true")
        backend = RedisBackend(client=mock_redis_client)

        manager = await create_manager(settings, backend=backend)

        assert isinstance(manager.config.lock_provider, RedisLockProvider)

    @pytest.mark.asyncio
    async def test_default_backend_is_connected(self, mock_redis_client):
        settings = make_settings(MANAGER_LOCKING_ENABLED="false", REDIS_HOST="redis.internal")

        with patch(
            "redis_manager.infrastructure.cache.redis_client.ConnectionManager.connect",
            new=AsyncMock(return_value=mock_redis_client),
        ) as connect:
            manager = await create_manager(settings)

        connect.assert_awaited_once()
        assert isinstance(manager.config.backend, RedisBackend)
        assert manager.config.backend.client is mock_redis_client
