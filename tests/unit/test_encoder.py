"""Unit tests for encoding."""

from __future__ import annotations

import dataclasses
import io
import logging
from collections import OrderedDict
from typing import Any, Optional

import pytest

from tnetstrings import (
    BaseRecord,
    CodecConfig,
    CyclicValue,
    Encoder,
    EncodeError,
    NestingTooDeep,
    NonStringKey,
    Tagged,
    UnsupportedType,
    dump,
    encode,
)


class TestEncodeScalars:
    """Test scalar encoding."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("hello, world", b"12:hello, world,"),
            ("日本語", "9:日本語,".encode()),
            ("", b"0:,"),
            ("a\x00b", b"3:a\x00b,"),
            (True, b"4:true!"),
            (False, b"5:false!"),
            (1, b"1:1#"),
            (-1, b"2:-1#"),
            (0, b"1:0#"),
            (1.0, b"8:1.000000^"),
            (-0.125, b"9:-0.125000^"),
            (None, b"0:~"),
        ],
    )
    def test_scalar(self, value: Any, expected: bytes) -> None:
        """Test the wire form of each scalar type."""
        assert encode(value) == expected

    def test_large_integer(self) -> None:
        """Test integers beyond 64 bits are written in full."""
        assert encode(2**64) == b"20:18446744073709551616#"

    def test_bytes_are_strings(self) -> None:
        """Test byte sequences use the string tag."""
        assert encode(b"abc") == b"3:abc,"
        assert encode(bytearray(b"abc")) == b"3:abc,"
        assert encode(memoryview(b"abc")) == b"3:abc,"
        assert encode(b"") == b"0:,"

    def test_custom_encoding(self) -> None:
        """Test the configured text encoding."""
        assert encode("é", config=CodecConfig(encoding="latin-1")) == b"1:\xe9,"

    def test_unencodable_text(self) -> None:
        """Test text the configured encoding cannot represent."""
        with pytest.raises(EncodeError):
            encode("日本", config=CodecConfig(encoding="ascii"))


class TestEncodeMapping:
    """Test mapping encoding."""

    def test_empty(self) -> None:
        """Test an empty mapping."""
        assert encode({}) == b"0:}"

    def test_sorted_keys(self) -> None:
        """Test keys are written in sorted order."""
        assert encode({"foo": None, "bar": 1}) == b"19:3:bar,1:1#3:foo,0:~}"

    def test_insertion_order_irrelevant(self) -> None:
        """Test mappings built in different orders encode identically."""
        first = OrderedDict([("b", 2), ("a", 1), ("c", 3)])
        second = {"c": 3, "a": 1, "b": 2}
        assert encode(first) == encode(second)

    def test_non_string_key(self) -> None:
        """Test a mapping with an integer key."""
        with pytest.raises(NonStringKey) as exc_info:
            encode({"a": 1, 2: "b"})
        assert exc_info.value.key == 2

    def test_nested(self) -> None:
        """Test a mapping holding a list."""
        assert encode({"a": [1]}) == b"11:1:a,4:1:1#]}"


class TestEncodeRecord:
    """Test record encoding."""

    def test_empty_record(self) -> None:
        """Test a record without fields."""

        class Empty(BaseRecord):
            pass

        assert encode(Empty()) == b"0:}"

    def test_plain_field(self) -> None:
        """Test a field without a directive."""

        class Plain(BaseRecord):
            Field: int

        assert encode(Plain(Field=1)) == b"12:5:Field,1:1#}"

    def test_named_field(self) -> None:
        """Test a renamed field."""

        class Named(BaseRecord):
            Field: int = Tagged("myName")

        assert encode(Named(Field=1)) == b"13:6:myName,1:1#}"

    def test_named_omitempty_empty(self) -> None:
        """Test an empty omit-if-empty field is skipped."""

        class NamedOmit(BaseRecord):
            Field: Optional[int] = Tagged("myName,omitempty", default=None)

        assert encode(NamedOmit()) == b"0:}"

    def test_omitempty_present(self) -> None:
        """Test a non-empty omit-if-empty field is written."""

        class Omit(BaseRecord):
            Field: Optional[int] = Tagged(",omitempty", default=None)

        assert encode(Omit(Field=1)) == b"12:5:Field,1:1#}"

    @pytest.mark.parametrize("empty", [0, 0.0, False, "", b"", [], {}])
    def test_omitempty_zero_values(self, empty: Any) -> None:
        """Test every kind of empty value is omitted."""

        @dataclasses.dataclass
        class Holder:
            value: Any = dataclasses.field(metadata={"tnetstrings": "v,omitempty"})

        assert encode(Holder(value=empty)) == b"0:}"

    def test_ignored_field(self) -> None:
        """Test an excluded field is never written."""

        class Ignored(BaseRecord):
            Field: int = Tagged("-")

        assert encode(Ignored(Field=1)) == b"0:}"

    def test_dash_comma_is_a_name(self) -> None:
        """Test that "-," names the field "-"."""

        class Weird(BaseRecord):
            Field: int = Tagged("-,")

        assert encode(Weird(Field=1)) == b"8:1:-,1:1#}"

    def test_declaration_order(self) -> None:
        """Test fields are written in declaration order, not sorted."""

        class Ordered(BaseRecord):
            z: int
            a: int

        assert encode(Ordered(z=1, a=2)) == b"16:1:z,1:1#1:a,1:2#}"

    def test_dataclass_private_field(self) -> None:
        """Test underscore-prefixed dataclass fields are not exported."""

        @dataclasses.dataclass
        class Private:
            _field: int = 1
            Field: int = 1

        assert encode(Private()) == b"12:5:Field,1:1#}"


class TestEncodeSequence:
    """Test sequence encoding."""

    def test_empty_list(self) -> None:
        """Test an empty list."""
        assert encode([]) == b"0:]"

    def test_list(self) -> None:
        """Test a list of strings."""
        assert encode(["foo", "bar", "baz"]) == b"18:3:foo,3:bar,3:baz,]"

    def test_tuple(self) -> None:
        """Test a tuple encodes as a list."""
        assert encode(("foo", "bar", "baz")) == b"18:3:foo,3:bar,3:baz,]"

    def test_mixed(self) -> None:
        """Test a heterogeneous list."""
        assert encode([1, "a", None, True]) == b"18:1:1#1:a,0:~4:true!]"


class TestEncodeErrors:
    """Test encoding error handling."""

    @pytest.mark.parametrize("value", [1j, {1, 2}, frozenset(), object()])
    def test_unsupported_type(self, value: Any) -> None:
        """Test values with no wire mapping."""
        with pytest.raises(UnsupportedType) as exc_info:
            encode(value)
        assert exc_info.value.python_type is type(value)

    def test_unsupported_nested(self) -> None:
        """Test an unsupported value deep inside a container."""
        with pytest.raises(UnsupportedType):
            encode({"a": [1, 2, {"b": 3j}]})

    def test_cyclic_list(self) -> None:
        """Test a list containing itself."""
        value: list = [1]
        value.append(value)
        with pytest.raises(CyclicValue):
            encode(value)

    def test_cyclic_mapping(self) -> None:
        """Test a mapping reachable from itself."""
        value: dict = {"inner": {}}
        value["inner"]["outer"] = value
        with pytest.raises(CyclicValue):
            encode(value)

    def test_shared_reference_is_not_cycle(self) -> None:
        """Test the same object appearing twice without a cycle."""
        shared = [1]
        assert encode([shared, shared]) == b"14:4:1:1#]4:1:1#]]"

    def test_depth_limit(self) -> None:
        """Test values nested beyond max_depth."""
        value: list = []
        for _ in range(10):
            value = [value]
        with pytest.raises(NestingTooDeep):
            encode(value, config=CodecConfig(max_depth=5))

    def test_sink_untouched_on_error(self) -> None:
        """Test a failed encode writes nothing."""
        sink = io.BytesIO()
        with pytest.raises(NonStringKey):
            dump({1: "a"}, sink)
        assert sink.getvalue() == b""


class TestEncoderStream:
    """Test the streaming Encoder."""

    def test_multiple_values(self) -> None:
        """Test consecutive values are concatenated frames."""
        sink = io.BytesIO()
        encoder = Encoder(sink)
        encoder.encode("a")
        encoder.encode(1)
        encoder.encode(None)
        assert sink.getvalue() == b"1:a,1:1#0:~"

    def test_write_errors_propagate(self) -> None:
        """Test sink failures reach the caller."""

        class BrokenSink:
            def write(self, data: bytes) -> int:
                raise OSError("disk full")

        with pytest.raises(OSError, match="disk full"):
            Encoder(BrokenSink()).encode("a")

    def test_logs_encoded_value(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test each top-level encode emits a debug record."""
        with caplog.at_level(logging.DEBUG, logger="tnetstrings.codec.encoder"):
            encode({"a": 1})

        assert caplog.messages == ["Encoded dict value"]
