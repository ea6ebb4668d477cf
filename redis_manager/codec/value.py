"""
Type-Preserving Value Codec

Serializes typed Python values into wire strings and back, so that a value
read from Redis has the same type it was written with.

Wire Format:
    None, bool, int, float, str, list, tuple, dict
        -> JSON text (orjson). Strings are JSON-quoted, so "123" stays a
           string and a caller string that looks like a tagged form cannot
           collide with one.
    int outside the signed 64-bit range
        -> <JSON_HANDLER_BIGINT_TAG>123...<JSON_HANDLER_BIGINT_TAG>
    bytes, bytearray, memoryview
        -> <JSON_HANDLER_BUFFER_TAG>00ff<JSON_HANDLER_BUFFER_TAG>

Known Limitations:
    - Raw text written by a foreign client is returned unchanged when it is
      not valid JSON. A foreign raw value identical to a tagged form is
      decoded as the tagged type.
    - Tuples decode as lists.
    - Float NaN and Infinity have no JSON form and are rejected.
    - Containers are JSON; nested integers must fit in 64 bits.
"""

import math
from typing import Any

import orjson

from redis_manager.core.config.constants import (
    BIGINT_TAG,
    BUFFER_TAG,
    INT64_MAX,
    INT64_MIN,
    Stage,
)
from redis_manager.core.exceptions import ErrorKind, RedisManagerError
from redis_manager.core.logging import get_logger

logger = get_logger(__name__)

_JSON_TYPES = (type(None), bool, int, float, str, list, tuple, dict)
_BYTES_TYPES = (bytes, bytearray, memoryview)


def _is_tagged(value: str, tag: str) -> bool:
    return len(value) >= 2 * len(tag) and value.startswith(tag) and value.endswith(tag)


def _untag(value: str, tag: str) -> str:
    return value[len(tag):-len(tag)]


def _has_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, (list, tuple)):
        return any(_has_non_finite(item) for item in value)
    if isinstance(value, dict):
        return any(_has_non_finite(item) for item in value.values())
    return False


class ValueCodec:
    """
    Encodes values for the backend and decodes them back, preserving type.

    Usage:
        codec = ValueCodec()
        wire = codec.serialize(b"\\x00\\xff")
        assert codec.parse(wire) == b"\\x00\\xff"
    """

    def serialize(self, value: Any) -> str:
        """
        Encode ``value`` into its wire form.

        Raises:
            RedisManagerError: INVALID_VALUE if the value has no wire form
        """
        if isinstance(value, _BYTES_TYPES):
            return BUFFER_TAG + bytes(value).hex() + BUFFER_TAG

        # bool is an int subclass and always fits in 64 bits
        if isinstance(value, int) and not isinstance(value, bool):
            if value < INT64_MIN or value > INT64_MAX:
                return BIGINT_TAG + str(value) + BIGINT_TAG

        if not isinstance(value, _JSON_TYPES):
            raise RedisManagerError(
                ErrorKind.INVALID_VALUE,
                f"Values of type {type(value).__name__} cannot be stored",
                details={"value_type": type(value).__name__},
            )

        try:
            encoded = orjson.dumps(value)
        except orjson.JSONEncodeError as e:
            logger.error("Value serialization failed", stage=Stage.CODEC, error=str(e))
            raise RedisManagerError.from_exception(
                ErrorKind.INVALID_VALUE,
                e,
                message=f"Value of type {type(value).__name__} is not JSON serializable: {e}",
                value_type=type(value).__name__,
            )

        # orjson writes NaN and Infinity as null
        if _has_non_finite(value):
            raise RedisManagerError(
                ErrorKind.INVALID_VALUE,
                "NaN and Infinity cannot be stored",
                details={"value_type": type(value).__name__},
            )
        return encoded.decode("utf-8")

    def parse(self, encoding: str | bytes) -> Any:
        """
        Decode a wire value produced by :meth:`serialize`.

        Raises:
            RedisManagerError: UNKNOWN_INTERNAL for wire values that are not
                text or carry a corrupt tagged payload
        """
        if isinstance(encoding, (bytes, bytearray)):
            try:
                encoding = bytes(encoding).decode("utf-8")
            except UnicodeDecodeError as e:
                raise RedisManagerError.from_exception(
                    ErrorKind.UNKNOWN_INTERNAL,
                    e,
                    message="Value from the backend is not valid UTF-8",
                )

        if not isinstance(encoding, str):
            raise RedisManagerError(
                ErrorKind.UNKNOWN_INTERNAL,
                "Value from the backend should be either a string or bytes",
                details={"value_type": type(encoding).__name__},
            )

        if _is_tagged(encoding, BUFFER_TAG):
            try:
                return bytes.fromhex(_untag(encoding, BUFFER_TAG))
            except ValueError as e:
                raise RedisManagerError.from_exception(
                    ErrorKind.UNKNOWN_INTERNAL, e, message="Corrupt binary payload in stored value"
                )

        if _is_tagged(encoding, BIGINT_TAG):
            try:
                return int(_untag(encoding, BIGINT_TAG))
            except ValueError as e:
                raise RedisManagerError.from_exception(
                    ErrorKind.UNKNOWN_INTERNAL, e, message="Corrupt big integer payload in stored value"
                )

        try:
            return orjson.loads(encoding)
        except orjson.JSONDecodeError:
            # Raw text from a foreign writer
            return encoding
