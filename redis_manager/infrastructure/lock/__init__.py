"""
Lock Module

Distributed mutual exclusion on redis-py's Lock.
"""

from .redis_lock import RedisLockHandle, RedisLockProvider

__all__ = [
    "RedisLockHandle",
    "RedisLockProvider",
]
