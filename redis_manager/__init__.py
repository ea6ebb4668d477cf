"""
redis-manager

Namespaced, type-preserving key-value storage on Redis with conditional
writes, bounded retry and optional per-key distributed locking.

Usage:
    from redis_manager import create_manager, ABSENT

    manager = await create_manager()
    await manager.add("user:1", {"name": "ada"})
    value = await manager.get("user:1")
"""

from redis_manager.core.exceptions import ErrorKind, RedisManagerError
from redis_manager.factory import create_manager
from redis_manager.manager import ABSENT, LockingManagerConfig, ManagerConfig, RedisManager

__version__ = "1.0.0"

__all__ = [
    "ABSENT",
    "ErrorKind",
    "LockingManagerConfig",
    "ManagerConfig",
    "RedisManager",
    "RedisManagerError",
    "create_manager",
]
