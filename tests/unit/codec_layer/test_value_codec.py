"""
Unit Tests for ValueCodec

Tests type-preserving encoding, the tagged wire forms and decode failures.
"""

import pytest

from redis_manager.codec import ValueCodec
from redis_manager.core.config.constants import BIGINT_TAG, BUFFER_TAG
from redis_manager.core.exceptions import ErrorKind, RedisManagerError


@pytest.fixture
def codec():
    return ValueCodec()


@pytest.mark.unit
class TestRoundTrip:
    """parse(serialize(v)) == v with type fidelity."""

    @pytest.mark.parametrize(
        "value",
        [
            None,
            True,
            False,
            123,
            -7,
            1.5,
            "s",
            "",
            12345678901234567890,
            -(10**30),
            b"\x00\xff",
            b"",
            [1, 2, 3],
            {"a": 1},
            {"nested": {"list": [None, True, "x"]}},
        ],
    )
    def test_round_trip(self, codec, value):
        result = codec.parse(codec.serialize(value))

        assert result == value
        assert type(result) is type(value)

    def test_numeric_looking_string_stays_string(self, codec):
        assert codec.parse(codec.serialize("123")) == "123"

    def test_tag_looking_string_stays_string(self, codec):
        """A caller string equal to a tagged form is stored quoted."""
        value = BUFFER_TAG + "00ff" + BUFFER_TAG

        assert codec.parse(codec.serialize(value)) == value

    def test_bytearray_and_memoryview_decode_as_bytes(self, codec):
        assert codec.parse(codec.serialize(bytearray(b"ab"))) == b"ab"
        assert codec.parse(codec.serialize(memoryview(b"cd"))) == b"cd"

    def test_tuple_decodes_as_list(self, codec):
        assert codec.parse(codec.serialize((1, 2))) == [1, 2]


@pytest.mark.unit
class TestWireFormat:
    """Test the exact encoded forms."""

    def test_bytes_use_buffer_tag(self, codec):
        assert codec.serialize(b"\x00\xff") == BUFFER_TAG + "00ff" + BUFFER_TAG

    def test_big_int_uses_bigint_tag(self, codec):
        assert codec.serialize(2**64) == BIGINT_TAG + "18446744073709551616" + BIGINT_TAG

    def test_int64_boundary_is_plain_json(self, codec):
        assert codec.serialize(2**63 - 1) == "9223372036854775807"
        assert codec.serialize(2**63) == BIGINT_TAG + "9223372036854775808" + BIGINT_TAG

    def test_string_is_quoted(self, codec):
        assert codec.serialize("s") == '"s"'

    def test_none_is_json_null(self, codec):
        assert codec.serialize(None) == "null"

    def test_bool_is_not_treated_as_int(self, codec):
        assert codec.serialize(True) == "true"


@pytest.mark.unit
class TestSerializeErrors:
    """Values without a wire form."""

    @pytest.mark.parametrize("value", [{1, 2}, object(), frozenset()])
    def test_unsupported_type(self, codec, value):
        with pytest.raises(RedisManagerError) as exc_info:
            codec.serialize(value)

        assert exc_info.value.kind is ErrorKind.INVALID_VALUE

    def test_nested_big_int(self, codec):
        with pytest.raises(RedisManagerError) as exc_info:
            codec.serialize([2**70])

        assert exc_info.value.kind is ErrorKind.INVALID_VALUE

    def test_nested_unsupported_object(self, codec):
        with pytest.raises(RedisManagerError) as exc_info:
            codec.serialize({"a": object()})

        assert exc_info.value.kind is ErrorKind.INVALID_VALUE

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_float(self, codec, value):
        with pytest.raises(RedisManagerError) as exc_info:
            codec.serialize(value)

        assert exc_info.value.kind is ErrorKind.INVALID_VALUE

    @pytest.mark.parametrize(
        "value",
        [[1.0, float("nan")], {"a": {"b": float("inf")}}, (0, [float("-inf")])],
    )
    def test_nested_non_finite_float(self, codec, value):
        with pytest.raises(RedisManagerError) as exc_info:
            codec.serialize(value)

        assert exc_info.value.kind is ErrorKind.INVALID_VALUE


@pytest.mark.unit
class TestParse:
    """Decoding backend values."""

    def test_bytes_input_is_decoded(self, codec):
        assert codec.parse(b'{"a": 1}') == {"a": 1}

    def test_foreign_raw_text_is_returned_unchanged(self, codec):
        assert codec.parse("plain text") == "plain text"

    def test_non_text_input(self, codec):
        with pytest.raises(RedisManagerError) as exc_info:
            codec.parse(42)

        assert exc_info.value.kind is ErrorKind.UNKNOWN_INTERNAL

    def test_invalid_utf8(self, codec):
        with pytest.raises(RedisManagerError) as exc_info:
            codec.parse(b"\xff\xfe")

        assert exc_info.value.kind is ErrorKind.UNKNOWN_INTERNAL

    def test_corrupt_buffer_payload(self, codec):
        with pytest.raises(RedisManagerError) as exc_info:
            codec.parse(BUFFER_TAG + "zz" + BUFFER_TAG)

        assert exc_info.value.kind is ErrorKind.UNKNOWN_INTERNAL

    def test_corrupt_bigint_payload(self, codec):
        with pytest.raises(RedisManagerError) as exc_info:
            codec.parse(BIGINT_TAG + "12a" + BIGINT_TAG)

        assert exc_info.value.kind is ErrorKind.UNKNOWN_INTERNAL
