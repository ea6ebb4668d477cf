"""
Cache Module

Redis-backed KeyValueBackend with connection pooling.
"""

from .redis_client import CONDITIONAL_SET_SCRIPT, ConnectionManager, RedisBackend

__all__ = [
    "CONDITIONAL_SET_SCRIPT",
    "ConnectionManager",
    "RedisBackend",
]
