"""
Unit Tests for PrefixCodec

Tests namespace prefixing, stripping and the scan pattern.
"""

import pytest

from redis_manager.codec import PrefixCodec
from redis_manager.core.exceptions import ErrorKind, RedisManagerError


@pytest.mark.unit
class TestConcat:
    """Test concat()."""

    def test_concat(self):
        assert PrefixCodec("ns").concat("a") == "ns:a"

    def test_key_may_contain_separator(self):
        assert PrefixCodec("ns").concat("user:1") == "ns:user:1"

    @pytest.mark.parametrize("key", ["", None, 1, b"a"])
    def test_invalid_keys(self, key):
        with pytest.raises(RedisManagerError) as exc_info:
            PrefixCodec("ns").concat(key)

        assert exc_info.value.kind is ErrorKind.INVALID_KEY


@pytest.mark.unit
class TestSplit:
    """Test split()."""

    def test_split(self):
        assert PrefixCodec("ns").split("ns:a") == "a"

    def test_only_leading_prefix_is_stripped(self):
        """A namespace repeated inside the key is left untouched."""
        assert PrefixCodec("ns").split("ns:ns:a") == "ns:a"
        assert PrefixCodec("ns").split("ns:x:ns:y") == "x:ns:y"

    def test_split_accepts_bytes(self):
        assert PrefixCodec("ns").split(b"ns:a") == "a"

    def test_foreign_key_rejected(self):
        with pytest.raises(RedisManagerError) as exc_info:
            PrefixCodec("ns").split("other:a")

        assert exc_info.value.kind is ErrorKind.INVALID_KEY

    def test_split_inverts_concat(self):
        codec = PrefixCodec("sessions")

        assert codec.split(codec.concat("user:42")) == "user:42"


@pytest.mark.unit
class TestPattern:
    """Test pattern()."""

    def test_pattern(self):
        assert PrefixCodec("ns").pattern() == "ns:*"

    def test_glob_characters_are_escaped(self):
        assert PrefixCodec("a*b?[c]").pattern() == r"a\*b\?\[c\]:*"


@pytest.mark.unit
class TestNamespace:
    """Test construction."""

    def test_accessors(self):
        codec = PrefixCodec("ns")

        assert codec.namespace == "ns"
        assert codec.prefix == "ns:"

    @pytest.mark.parametrize("namespace", ["app:v2", ":app", "app:"])
    def test_separator_in_namespace_rejected(self, namespace):
        with pytest.raises(RedisManagerError) as exc_info:
            PrefixCodec(namespace)

        assert exc_info.value.kind is ErrorKind.INVALID_KEY

    @pytest.mark.parametrize("namespace", ["", None, 5])
    def test_invalid_namespace(self, namespace):
        with pytest.raises(RedisManagerError) as exc_info:
            PrefixCodec(namespace)

        assert exc_info.value.kind is ErrorKind.INVALID_KEY
