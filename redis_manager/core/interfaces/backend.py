"""
Key-Value Backend Protocol

Abstract protocol for the store the manager writes to, enabling dependency
injection and testability.

Architectural Decision: Protocol-based abstraction
- RedisBackend in production, in-memory doubles in tests
- The manager never imports redis directly
- Type-safe interface with runtime checking
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from redis_manager.core.config.constants import SetMode


@dataclass(frozen=True)
class BatchOutcome:
    """
    Per-step result of an atomic conditional-set + expire batch.

    Attributes:
        set_applied: The conditional SET wrote the value
        expiry_applied: The expire step applied; None when no expiry was requested
    """

    set_applied: bool
    expiry_applied: bool | None = None


@runtime_checkable
class KeyValueBackend(Protocol):
    """
    Protocol defining the store operations the manager relies on.

    Every method raises BackendCommandError when the command could not be
    executed. Domain outcomes (key present/absent) are return values, never
    exceptions.
    """

    async def exists(self, key: str) -> bool:
        """Return True if ``key`` is stored."""
        ...

    async def get(self, key: str) -> str | bytes | None:
        """Return the raw wire value, or None if absent."""
        ...

    async def conditional_set(
        self,
        key: str,
        value: str,
        mode: SetMode,
        expiry_ms: int | None = None,
    ) -> BatchOutcome:
        """
        Atomically SET ``key`` under ``mode`` and, if the set applied and
        ``expiry_ms`` is given, set its expiry in the same unit.
        """
        ...

    async def delete(self, key: str) -> int:
        """Delete ``key``; return the number of keys removed."""
        ...

    async def scan(self, pattern: str) -> list[str]:
        """Return every stored key matching the glob ``pattern``."""
        ...

    async def flush_namespace(self, pattern: str) -> int:
        """Delete every key matching ``pattern``; return the count removed."""
        ...

    async def flush_all(self) -> None:
        """Remove every key in the backend database."""
        ...
