"""
Namespace prefixing for backend keys.
"""

import re

from redis_manager.core.config.constants import NAMESPACE_SEPARATOR
from redis_manager.core.exceptions import ErrorKind, RedisManagerError

# Characters with special meaning in Redis SCAN MATCH patterns
_GLOB_SPECIALS = re.compile(r"([*?\[\]\\])")


class PrefixCodec:
    """
    Maps logical keys to ``namespace:key`` and back.

    The prefixed form is the only key form ever sent to the backend.
    """

    def __init__(self, namespace: str):
        if not isinstance(namespace, str) or not namespace:
            raise RedisManagerError(
                ErrorKind.INVALID_KEY,
                "Namespace must be a non-empty string",
                details={"namespace": repr(namespace)},
            )
        if NAMESPACE_SEPARATOR in namespace:
            raise RedisManagerError(
                ErrorKind.INVALID_KEY,
                f"Namespace must not contain {NAMESPACE_SEPARATOR!r}",
                details={"namespace": namespace},
            )
        self._namespace = namespace
        self._prefix = namespace + NAMESPACE_SEPARATOR

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def prefix(self) -> str:
        return self._prefix

    def concat(self, key: str) -> str:
        """
        Return the prefixed form of ``key``.

        Raises:
            RedisManagerError: INVALID_KEY if ``key`` is not a non-empty string
        """
        if not isinstance(key, str):
            raise RedisManagerError(
                ErrorKind.INVALID_KEY,
                f"Key must be a string, got {type(key).__name__}",
                details={"namespace": self._namespace, "key": repr(key)},
            )
        if not key:
            raise RedisManagerError(
                ErrorKind.INVALID_KEY,
                "Key must not be empty",
                details={"namespace": self._namespace},
            )
        return self._prefix + key

    def split(self, prefixed_key: str) -> str:
        """
        Strip the namespace prefix from ``prefixed_key``.

        Only a leading prefix is removed; the namespace appearing elsewhere in
        the key is left untouched.

        Raises:
            RedisManagerError: INVALID_KEY if the key is outside this namespace
        """
        if isinstance(prefixed_key, bytes):
            prefixed_key = prefixed_key.decode("utf-8")
        if not isinstance(prefixed_key, str) or not prefixed_key.startswith(self._prefix):
            raise RedisManagerError(
                ErrorKind.INVALID_KEY,
                f"Key {prefixed_key!r} does not belong to namespace {self._namespace!r}",
                details={"namespace": self._namespace, "key": repr(prefixed_key)},
            )
        return prefixed_key[len(self._prefix):]

    def pattern(self) -> str:
        """SCAN MATCH pattern covering every key of this namespace."""
        return _GLOB_SPECIALS.sub(r"\\\1", self._namespace) + NAMESPACE_SEPARATOR + "*"
