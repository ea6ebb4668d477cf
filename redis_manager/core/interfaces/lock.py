"""
Distributed Lock Protocols

The manager consumes mutual exclusion only through ``acquire`` and
``release``; the provider's quorum and fencing algorithm is its own concern.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class LockHandle(Protocol):
    """A held lock over one or more resources."""

    async def release(self) -> None:
        """
        Release every resource held by this handle.

        Raises:
            Exception: Provider-specific failure (e.g. lock expired and lost)
        """
        ...


@runtime_checkable
class LockProvider(Protocol):
    """Acquires TTL-bounded locks over named resources."""

    async def acquire(self, resources: Sequence[str], ttl_ms: int) -> LockHandle:
        """
        Acquire exclusive locks over ``resources`` for at most ``ttl_ms``.

        Raises:
            Exception: Provider-specific failure, including timeout waiting
                for a lock held elsewhere
        """
        ...
