"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tests.test_fixtures import BackendTestFactory, LockTestFactory  # noqa: E402

# ============================================================================
# Environment-Based Integration Toggles
# ============================================================================


@pytest.fixture(scope="session")
def use_real_redis():
    """Check if real Redis should be used for integration tests."""
    return os.getenv("USE_REAL_REDIS", "0").lower() in ("1", "true", "yes")


# ============================================================================
# Namespaces
# ============================================================================


@pytest.fixture
def namespace():
    """Unique namespace per test so real-Redis runs never collide."""
    return f"test-{uuid.uuid4().hex[:8]}"


# ============================================================================
# Test Doubles
# ============================================================================


@pytest.fixture
def backend():
    """Empty in-memory backend."""
    return BackendTestFactory.empty()


@pytest.fixture
def lock_provider():
    """In-memory lock provider recording acquire/release calls."""
    return LockTestFactory.working()


@pytest.fixture
def mock_redis_client():
    """
    Mock redis.asyncio.Redis client for adapter tests.

    Commands are AsyncMocks; ``register_script`` returns a callable script
    mock configurable through ``client.script``.
    """
    client = MagicMock()
    client.ping = AsyncMock(return_value=True)
    client.exists = AsyncMock(return_value=0)
    client.get = AsyncMock(return_value=None)
    client.delete = AsyncMock(return_value=0)
    client.unlink = AsyncMock(return_value=0)
    client.flushdb = AsyncMock(return_value=True)
    client.aclose = AsyncMock()

    client.script = AsyncMock(return_value=[1, -1])
    client.register_script = MagicMock(return_value=client.script)
    return client


# ============================================================================
# Managers
# ============================================================================


@pytest.fixture
def manager(backend, namespace):
    """Non-locking manager over the in-memory backend."""
    from redis_manager.manager import ManagerConfig, RedisManager

    return RedisManager(ManagerConfig(backend=backend, namespace=namespace))


@pytest.fixture
def locking_manager(backend, lock_provider, namespace):
    """Locking manager over the in-memory backend and lock provider."""
    from redis_manager.manager import LockingManagerConfig, RedisManager

    return RedisManager(
        LockingManagerConfig(
            backend=backend,
            namespace=namespace,
            lock_provider=lock_provider,
            default_lock_ttl_ms=5000,
        )
    )


@pytest.fixture
def manager_factory(namespace):
    """
    Build managers with arbitrary configuration.

    Usage:
        mgr = manager_factory(backend, max_retries=0, default_expiry_ms=1000)
        mgr = manager_factory(backend, lock_provider=provider)
    """
    from redis_manager.manager import LockingManagerConfig, ManagerConfig, RedisManager

    def build(backend, lock_provider=None, default_lock_ttl_ms=5000, **options):
        options.setdefault("namespace", namespace)
        if lock_provider is None:
            return RedisManager(ManagerConfig(backend=backend, **options))
        return RedisManager(
            LockingManagerConfig(
                backend=backend,
                lock_provider=lock_provider,
                default_lock_ttl_ms=default_lock_ttl_ms,
                **options,
            )
        )

    return build
