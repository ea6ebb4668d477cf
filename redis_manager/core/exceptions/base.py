"""
Manager Error Taxonomy

A single exception type carrying a closed ``ErrorKind`` discriminant. Callers
branch on ``error.kind`` instead of catching one subclass per failure.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """
    Closed set of failure kinds surfaced by the manager.

    Each kind keeps a stable numeric code so log pipelines and existing
    clients can keep matching on numbers.
    """

    KEY_EXISTS = "KEY_EXISTS"
    KEY_NOT_EXIST = "KEY_NOT_EXIST"
    INVALID_KEY = "INVALID_KEY"
    INVALID_VALUE = "INVALID_VALUE"
    BACKEND_INTERNAL = "BACKEND_INTERNAL"
    LOCK_INTERNAL = "LOCK_INTERNAL"
    UNKNOWN_INTERNAL = "UNKNOWN_INTERNAL"

    @property
    def code(self) -> int:
        return _ERROR_CODES[self]


_ERROR_CODES: dict[ErrorKind, int] = {
    ErrorKind.KEY_EXISTS: 10,
    ErrorKind.KEY_NOT_EXIST: 11,
    ErrorKind.INVALID_KEY: 12,
    ErrorKind.INVALID_VALUE: 20,
    ErrorKind.BACKEND_INTERNAL: 30,
    ErrorKind.LOCK_INTERNAL: 40,
    ErrorKind.UNKNOWN_INTERNAL: 50,
}


class RedisManagerError(Exception):
    """
    Error raised by every manager operation.

    Attributes:
        kind: Failure discriminant
        message: Human-readable message
        details: Additional error details (dict)
        cause: Wrapped original exception, if any

    Example:
        try:
            await manager.add("user:1", {"name": "ada"})
        except RedisManagerError as e:
            if e.kind is ErrorKind.KEY_EXISTS:
                ...
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        self.kind = kind
        self.message = message
        self.details = (details or {}).copy()  # Create a copy to prevent external modification
        self.cause = cause
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def code(self) -> int:
        """Stable numeric code of the error kind."""
        return self.kind.code

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging.

        Returns:
            Dict with kind, code, message, details and the wrapped cause
        """
        return {
            "error_type": self.__class__.__name__,
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "cause": repr(self.cause) if self.cause is not None else None,
        }

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        cause_str = f", cause={self.cause!r}" if self.cause is not None else ""
        return f"{self.__class__.__name__}(kind={self.kind.value}, message='{self.message}'{details_str}{cause_str})"

    @classmethod
    def from_exception(
        cls,
        kind: ErrorKind,
        exc: BaseException,
        message: str | None = None,
        **details,
    ) -> "RedisManagerError":
        """
        Wrap a third-party exception with a kind and context.

        Example:
            >>> try:
            ...     await handle.release()
            ... except LockError as e:
            ...     raise RedisManagerError.from_exception(
            ...         ErrorKind.LOCK_INTERNAL, e, key="lock:ns:a"
            ...     )
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details,
        }
        return cls(kind, error_message, details=error_details, cause=exc)
