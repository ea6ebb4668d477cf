"""
Test Fixtures Package

Shared test doubles for the backend and lock protocols.
"""

from .backend_factory import BackendTestFactory, InMemoryBackend
from .lock_factory import (
    InMemoryLockHandle,
    InMemoryLockProvider,
    LockLostError,
    LockTestFactory,
    LockUnavailableError,
)

__all__ = [
    "BackendTestFactory",
    "InMemoryBackend",
    "InMemoryLockHandle",
    "InMemoryLockProvider",
    "LockLostError",
    "LockTestFactory",
    "LockUnavailableError",
]
