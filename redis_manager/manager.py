"""
Namespaced Redis Key-Value Manager

Architecture:
    RedisManager
        ├── PrefixCodec (namespace:key mapping)
        ├── ValueCodec (type-preserving wire format)
        ├── Lock guard (no-op, or distributed lock per key)
        └── KeyValueBackend calls wrapped in bounded retry

Write Flow:
    1. Resolve the prefixed key and encode the value
    2. Acquire lock:<prefixed key> (locking configurations only)
    3. Run the atomic conditional set (+ expiry) with retry
    4. Map the batch outcome to "OK" or a domain conflict
    5. Release the lock on every exit path

Every failure leaves as a RedisManagerError whose ``kind`` tells the caller
what happened. Reads never take a lock.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from redis_manager.codec import PrefixCodec, ValueCodec
from redis_manager.core.config.constants import (
    DEFAULT_MAX_RETRIES,
    LOCK_KEY_PREFIX,
    NAMESPACE_SEPARATOR,
    WRITE_OK,
    SetMode,
    Stage,
)
from redis_manager.core.exceptions import BackendCommandError, ErrorKind, RedisManagerError
from redis_manager.core.interfaces import KeyValueBackend, LockProvider
from redis_manager.core.logging import get_logger, operation_scope
from redis_manager.core.resilience import call_with_retry

logger = get_logger(__name__)

T = TypeVar("T")


# =============================================================================
# ABSENT SENTINEL
# =============================================================================


class _Absent:
    """Marker for a key with no stored entry; distinct from a stored None."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()


# =============================================================================
# CONFIGURATION
# =============================================================================


class ManagerConfig(BaseModel):
    """
    Configuration of a manager that does not lock.

    Attributes:
        backend: Store the manager writes to
        namespace: Prefix shared by every key of this manager
        default_expiry_ms: Expiry applied on every write; None keeps entries forever
        max_retries: Retries after the first attempt on backend failures
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    backend: KeyValueBackend
    namespace: str = Field(min_length=1)
    default_expiry_ms: int | None = Field(default=None, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        # ns:* scans must never reach the keys of another namespace
        if NAMESPACE_SEPARATOR in v:
            raise ValueError(f"namespace must not contain {NAMESPACE_SEPARATOR!r}")
        return v


class LockingManagerConfig(ManagerConfig):
    """
    Configuration of a manager that serializes mutations per key.

    Attributes:
        lock_provider: Distributed lock used around add/update/upsert/delete
        default_lock_ttl_ms: Lock TTL when a call does not pass its own
    """

    lock_provider: LockProvider
    default_lock_ttl_ms: int = Field(gt=0)


# =============================================================================
# LOCK GUARDS
# =============================================================================


class _NoLock:
    """Guard used by non-locking managers."""

    @asynccontextmanager
    async def hold(self, prefixed_key: str, lock_ttl_ms: int | None) -> AsyncIterator[None]:
        yield


class _KeyLock:
    """
    Holds lock:<prefixed key> around a mutation.

    Acquire and release failures both surface as LOCK_INTERNAL. A release
    failure wins over an error raised by the guarded block; that error is
    kept in ``details["operation_error"]`` and as the cause.
    """

    def __init__(self, provider: LockProvider, default_ttl_ms: int):
        self._provider = provider
        self._default_ttl_ms = default_ttl_ms

    @asynccontextmanager
    async def hold(self, prefixed_key: str, lock_ttl_ms: int | None) -> AsyncIterator[None]:
        resource = LOCK_KEY_PREFIX + prefixed_key
        ttl_ms = lock_ttl_ms if lock_ttl_ms is not None else self._default_ttl_ms

        try:
            handle = await self._provider.acquire([resource], ttl_ms)
        except Exception as e:
            error = RedisManagerError.from_exception(
                ErrorKind.LOCK_INTERNAL,
                e,
                message=f"Failed to acquire lock {resource}: {e}",
                resource=resource,
                ttl_ms=ttl_ms,
            )
            logger.error("Lock acquisition failed", stage=Stage.LOCK_ACQUIRE, **error.to_dict())
            raise error

        logger.debug("Lock acquired", stage=Stage.LOCK_ACQUIRE, resource=resource, ttl_ms=ttl_ms)

        operation_error: BaseException | None = None
        try:
            yield
        except BaseException as e:
            operation_error = e
            raise
        finally:
            try:
                await handle.release()
            except Exception as e:
                details: dict[str, Any] = {
                    "resource": resource,
                    "original_error": e.__class__.__name__,
                    "original_message": str(e),
                }
                if operation_error is not None:
                    details["operation_error"] = repr(operation_error)
                error = RedisManagerError(
                    ErrorKind.LOCK_INTERNAL,
                    f"Failed to release lock {resource}: {e}",
                    details=details,
                    cause=operation_error if operation_error is not None else e,
                )
                logger.error("Lock release failed", stage=Stage.LOCK_RELEASE, **error.to_dict())
                raise error
            logger.debug("Lock released", stage=Stage.LOCK_RELEASE, resource=resource)


# =============================================================================
# MANAGER
# =============================================================================


class RedisManager:
    """
    Namespaced, typed key-value access on top of a KeyValueBackend.

    Usage:
        manager = RedisManager(ManagerConfig(backend=backend, namespace="sessions"))
        await manager.add("user:1", {"name": "ada"})
        value = await manager.get("user:1")
        if value is ABSENT:
            ...

    Locking is decided by the configuration shape: LockingManagerConfig
    serializes add/update/upsert/delete per key, ManagerConfig does not.
    """

    _CONFLICTS = {
        SetMode.NX: (ErrorKind.KEY_EXISTS, "Key already exists"),
        SetMode.XX: (ErrorKind.KEY_NOT_EXIST, "Key does not exist"),
    }

    def __init__(self, config: ManagerConfig):
        self._config = config
        self._backend = config.backend
        self._keys = PrefixCodec(config.namespace)
        self._values = ValueCodec()

        if isinstance(config, LockingManagerConfig):
            self._lock = _KeyLock(config.lock_provider, config.default_lock_ttl_ms)
        else:
            self._lock = _NoLock()

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def config(self) -> ManagerConfig:
        return self._config

    @property
    def namespace(self) -> str:
        return self._config.namespace

    @property
    def default_expiry_ms(self) -> int | None:
        return self._config.default_expiry_ms

    @property
    def max_retries(self) -> int:
        return self._config.max_retries

    @property
    def locking_enabled(self) -> bool:
        return isinstance(self._config, LockingManagerConfig)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _call_backend(self, stage: Stage, operation: Callable[[], Awaitable[T]], **context: Any) -> T:
        """Run one backend call under the retry policy and translate its failures."""
        try:
            return await call_with_retry(operation, self.max_retries, description=stage.value)
        except BackendCommandError as e:
            attempts = self.max_retries + 1
            error = RedisManagerError.from_exception(
                ErrorKind.BACKEND_INTERNAL,
                e,
                message=f"Backend call failed after {attempts} attempts: {e}",
                attempts=attempts,
                namespace=self.namespace,
                **context,
            )
            logger.error("Backend retries exhausted", stage=stage, **error.to_dict())
            raise error
        except RedisManagerError:
            raise
        except Exception as e:
            error = RedisManagerError.from_exception(
                ErrorKind.UNKNOWN_INTERNAL,
                e,
                message=f"Unexpected backend failure: {e}",
                namespace=self.namespace,
                **context,
            )
            logger.error("Unexpected backend failure", stage=stage, **error.to_dict())
            raise error

    async def _write(self, stage: Stage, mode: SetMode, key: str, value: Any, lock_ttl_ms: int | None) -> str:
        with operation_scope():
            prefixed = self._keys.concat(key)
            wire = self._values.serialize(value)
            expiry_ms = self.default_expiry_ms

            async with self._lock.hold(prefixed, lock_ttl_ms):
                outcome = await self._call_backend(
                    stage,
                    lambda: self._backend.conditional_set(prefixed, wire, mode, expiry_ms),
                    key=prefixed,
                )

                if not outcome.set_applied:
                    kind, message = self._CONFLICTS.get(
                        mode, (ErrorKind.BACKEND_INTERNAL, "Unconditional set was not applied")
                    )
                    error = RedisManagerError(kind, message, details={"key": key, "namespace": self.namespace})
                    logger.info("Write rejected", stage=stage, **error.to_dict())
                    raise error

                if expiry_ms is not None and not outcome.expiry_applied:
                    error = RedisManagerError(
                        ErrorKind.BACKEND_INTERNAL,
                        "Value was written but its expiry was not applied",
                        details={"key": key, "namespace": self.namespace, "expiry_ms": expiry_ms},
                    )
                    logger.error("Expiry not applied", stage=stage, **error.to_dict())
                    raise error

            logger.info("Key written", stage=stage, key=key, namespace=self.namespace, mode=mode.value)
            return WRITE_OK

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def add(self, key: str, value: Any, lock_ttl_ms: int | None = None) -> str:
        """
        Store ``value`` under ``key`` only if the key is absent.

        Returns:
            "OK"

        Raises:
            RedisManagerError: KEY_EXISTS when the key is already stored,
                INVALID_KEY / INVALID_VALUE for bad input, BACKEND_INTERNAL
                when retries are exhausted or the expiry was not applied,
                LOCK_INTERNAL on lock failure
        """
        return await self._write(Stage.ADD, SetMode.NX, key, value, lock_ttl_ms)

    async def update(self, key: str, value: Any, lock_ttl_ms: int | None = None) -> str:
        """
        Replace the value of an existing key.

        Raises:
            RedisManagerError: KEY_NOT_EXIST when the key is absent; otherwise as add()
        """
        return await self._write(Stage.UPDATE, SetMode.XX, key, value, lock_ttl_ms)

    async def upsert(self, key: str, value: Any, lock_ttl_ms: int | None = None) -> str:
        """Store ``value`` under ``key`` whether or not it exists."""
        return await self._write(Stage.UPSERT, SetMode.ALWAYS, key, value, lock_ttl_ms)

    async def delete(self, key: str, lock_ttl_ms: int | None = None) -> bool:
        """
        Remove ``key``.

        Returns:
            True if an entry was removed, False if the key was absent
        """
        with operation_scope():
            prefixed = self._keys.concat(key)
            async with self._lock.hold(prefixed, lock_ttl_ms):
                removed = await self._call_backend(
                    Stage.DELETE, lambda: self._backend.delete(prefixed), key=prefixed
                )
            logger.info("Key deleted", stage=Stage.DELETE, key=key, namespace=self.namespace, removed=removed)
            return removed > 0

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> Any:
        """
        Return the stored value, decoded to its original type.

        Returns:
            The value, or ABSENT when the key is not stored
        """
        with operation_scope():
            prefixed = self._keys.concat(key)
            raw = await self._call_backend(Stage.GET, lambda: self._backend.get(prefixed), key=prefixed)
            if raw is None:
                logger.debug("Key not found", stage=Stage.GET, key=key, namespace=self.namespace)
                return ABSENT
            return self._values.parse(raw)

    async def has(self, key: str) -> bool:
        with operation_scope():
            prefixed = self._keys.concat(key)
            return await self._call_backend(Stage.HAS, lambda: self._backend.exists(prefixed), key=prefixed)

    async def keys(self) -> list[str]:
        """Logical keys currently stored in this namespace, sorted."""
        with operation_scope():
            pattern = self._keys.pattern()
            stored = await self._call_backend(Stage.KEYS, lambda: self._backend.scan(pattern), pattern=pattern)
            return sorted(self._keys.split(prefixed) for prefixed in stored)

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    async def clear_namespace(self) -> None:
        """
        Remove every entry of this namespace.

        Not isolated from concurrent writers: keys written during the scan
        may survive.
        """
        with operation_scope():
            pattern = self._keys.pattern()
            removed = await self._call_backend(
                Stage.CLEAR_NAMESPACE, lambda: self._backend.flush_namespace(pattern), pattern=pattern
            )
            logger.info("Namespace cleared", stage=Stage.CLEAR_NAMESPACE, namespace=self.namespace, removed=removed)

    async def clear_all(self) -> None:
        """Remove every key in the backend database, across all namespaces."""
        with operation_scope():
            await self._call_backend(Stage.CLEAR_ALL, self._backend.flush_all)
            logger.warning("Backend database flushed", stage=Stage.CLEAR_ALL, namespace=self.namespace)
