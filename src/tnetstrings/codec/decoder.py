"""Tagged netstring decoder.

This module provides the Decoder class and the decode()/load() helpers that
turn frames back into Python values. The value built for a frame depends on
both the frame's tag and the requested target annotation; with no target
(``Any``) the tag alone decides.
"""

from __future__ import annotations

import io
import logging
import math
import re
import struct
from typing import Any, BinaryIO, Iterator, Optional

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import (
    DecodeError,
    MalformedPayload,
    NestingTooDeep,
    TrailingData,
    TypeMismatch,
)
from ..framing import Frame, FrameReader, Tag
from .schema import RecordSchema
from .shapes import DYNAMIC, STRING, Shape, ShapeKind, shape_of, zero_value

logger = logging.getLogger(__name__)

_SIGNED = re.compile(rb"-?[0-9]+")
_UNSIGNED = re.compile(rb"[0-9]+")
_FLOAT = re.compile(rb"-?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?|inf|nan)")

_TRUE = b"true"
_FALSE = b"false"


class Decoder:
    """Streaming decoder over a binary source.

    Each decode() call reads exactly one top-level frame. Iterating over a
    decoder yields dynamically-typed values until the source ends cleanly.

    Example:
        ```python
        with open("events.tns", "rb") as f:
            decoder = Decoder(f)
            header = decoder.decode(Header)
            for event in decoder:
                handle(event)
        ```
    """

    def __init__(self, source: BinaryIO, config: Optional[CodecConfig] = None) -> None:
        """Initialize a decoder.

        Args:
            source: Object with a binary read(n) method
            config: Codec configuration (defaults to CodecConfig())
        """
        self._reader = FrameReader(source)
        self.config = config or DEFAULT_CONFIG

    @property
    def offset(self) -> int:
        """Number of bytes consumed from the source."""
        return self._reader.offset

    def more(self) -> bool:
        """Return True if the source has more data."""
        return self._reader.more()

    def decode(self, target: Any = Any) -> Any:
        """Decode the next frame into ``target``.

        Args:
            target: Type annotation to decode into (``Any`` for dynamic)

        Returns:
            Decoded value

        Raises:
            EndOfStream: If the source is already exhausted
            SchemaError: If the target annotation has no wire mapping
            FramingError: If the frame is malformed or truncated
            DecodeError: If the frame cannot be bound to the target
            NestingTooDeep: If the frame nests deeper than config.max_depth
        """
        shape = shape_of(target)
        frame = self._reader.read_frame()
        value = _bind(frame, shape, self.config, 0)
        logger.debug("Decoded %d-byte %r frame as %s", frame.size, chr(frame.tag), shape.kind.value)
        return value

    def __iter__(self) -> Iterator[Any]:
        while self.more():
            yield self.decode()


def decode(data: bytes, target: Any = Any, *, config: Optional[CodecConfig] = None) -> Any:
    """Decode a single frame held in memory.

    Args:
        data: Exactly one encoded frame
        target: Type annotation to decode into (``Any`` for dynamic)
        config: Codec configuration

    Returns:
        Decoded value

    Raises:
        TrailingData: If bytes remain after the frame
        TnetstringsError: For any other framing or decode failure

    Examples:
        ```python
        from typing import Optional
        from tnetstrings import decode

        decode(b"12:3:foo,3:bar,}")            # {"foo": "bar"}
        decode(b"5:12345#", int)               # 12345
        decode(b"0:~", Optional[int])          # None
        decode(b"12:3:foo,3:bar,]", list[str])  # ["foo", "bar"]
        ```
    """
    decoder = Decoder(io.BytesIO(data), config)
    value = decoder.decode(target)
    if decoder.more():
        raise TrailingData(len(data) - decoder.offset)
    return value


def load(source: BinaryIO, target: Any = Any, *, config: Optional[CodecConfig] = None) -> Any:
    """Decode the next frame from a binary source.

    The source is left positioned immediately after the frame.
    """
    return Decoder(source, config).decode(target)


def _bind(frame: Frame, shape: Shape, config: CodecConfig, depth: int) -> Any:
    """Convert one frame into a value of the given shape."""
    # Optional layers are unwrapped in place, not by recursion
    while shape.kind is ShapeKind.OPTIONAL:
        if frame.tag is Tag.NULL:
            return None
        shape = shape.items[0]

    return _BINDERS[frame.tag](frame, shape, config, depth)


def _bind_string(frame: Frame, shape: Shape, config: CodecConfig, depth: int) -> Any:
    kind = shape.kind

    if kind is ShapeKind.BYTES:
        return shape.python_type(frame.payload)

    if kind is ShapeKind.DYNAMIC and config.raw_strings:
        return frame.payload

    if kind in (ShapeKind.STRING, ShapeKind.DYNAMIC):
        try:
            return frame.payload.decode(config.encoding)
        except UnicodeDecodeError as e:
            raise MalformedPayload(frame.tag, frame.payload, f"invalid {config.encoding}: {e}") from e

    raise TypeMismatch(frame.tag, shape.target)


def _bind_integer(frame: Frame, shape: Shape, config: CodecConfig, depth: int) -> int:
    if shape.kind not in (ShapeKind.INTEGER, ShapeKind.DYNAMIC):
        raise TypeMismatch(frame.tag, shape.target)

    width = shape.int_width
    pattern = _SIGNED if width.signed else _UNSIGNED
    if not pattern.fullmatch(frame.payload):
        raise MalformedPayload(frame.tag, frame.payload, "invalid syntax")

    try:
        value = int(frame.payload.decode("ascii"))
    except ValueError as e:
        raise MalformedPayload(frame.tag, frame.payload, str(e)) from e

    if not width.min_value <= value <= width.max_value:
        signedness = "signed" if width.signed else "unsigned"
        raise MalformedPayload(
            frame.tag, frame.payload, f"value out of range for {width.bits}-bit {signedness} integer"
        )

    return value


def _bind_float(frame: Frame, shape: Shape, config: CodecConfig, depth: int) -> float:
    if shape.kind not in (ShapeKind.FLOAT, ShapeKind.DYNAMIC):
        raise TypeMismatch(frame.tag, shape.target)

    if not _FLOAT.fullmatch(frame.payload):
        raise MalformedPayload(frame.tag, frame.payload, "invalid syntax")

    text = frame.payload.decode("ascii")
    value = float(text)

    # Finite text that overflows to infinity
    if math.isinf(value) and "inf" not in text:
        raise MalformedPayload(frame.tag, frame.payload, "value out of range")

    if shape.float_bits == 32:
        try:
            value = struct.unpack(">f", struct.pack(">f", value))[0]
        except OverflowError as e:
            raise MalformedPayload(frame.tag, frame.payload, "value out of range for float32") from e

    return value


def _bind_boolean(frame: Frame, shape: Shape, config: CodecConfig, depth: int) -> bool:
    if shape.kind not in (ShapeKind.BOOLEAN, ShapeKind.DYNAMIC):
        raise TypeMismatch(frame.tag, shape.target)

    if frame.payload == _TRUE:
        return True
    if frame.payload == _FALSE:
        return False
    raise MalformedPayload(frame.tag, frame.payload, "expected 'true' or 'false'")


def _bind_null(frame: Frame, shape: Shape, config: CodecConfig, depth: int) -> None:
    # Optional targets are handled in _bind; the payload is ignored
    if shape.kind is not ShapeKind.DYNAMIC:
        raise TypeMismatch(frame.tag, shape.target)
    return None


def _bind_dictionary(frame: Frame, shape: Shape, config: CodecConfig, depth: int) -> Any:
    kind = shape.kind
    if kind not in (ShapeKind.RECORD, ShapeKind.MAPPING, ShapeKind.DYNAMIC):
        raise TypeMismatch(frame.tag, shape.target)
    if depth >= config.max_depth:
        raise NestingTooDeep(config.max_depth)

    reader = FrameReader(io.BytesIO(frame.payload))

    if kind is ShapeKind.RECORD:
        schema = RecordSchema.from_type(shape.python_type)
        values: dict[str, Any] = {}
        while reader.more():
            key = _decode_key(reader, config, depth + 1)
            field_schema = schema.lookup(key)
            values[field_schema.name] = _bind(
                reader.read_frame(), field_schema.shape, config, depth + 1
            )
        return schema.build(values)

    value_shape = shape.items[0] if kind is ShapeKind.MAPPING else DYNAMIC
    result: dict[str, Any] = {}
    while reader.more():
        key = _decode_key(reader, config, depth + 1)
        # Later duplicates overwrite earlier ones
        result[key] = _bind(reader.read_frame(), value_shape, config, depth + 1)
    return result


def _decode_key(reader: FrameReader, config: CodecConfig, depth: int) -> str:
    key = _bind(reader.read_frame(), STRING, config, depth)
    if not reader.more():
        raise DecodeError(f"dictionary key {key!r} has no value")
    return key


def _bind_list(frame: Frame, shape: Shape, config: CodecConfig, depth: int) -> Any:
    kind = shape.kind
    if kind not in (ShapeKind.LIST, ShapeKind.ARRAY, ShapeKind.TUPLE, ShapeKind.DYNAMIC):
        raise TypeMismatch(frame.tag, shape.target)
    if depth >= config.max_depth:
        raise NestingTooDeep(config.max_depth)

    reader = FrameReader(io.BytesIO(frame.payload))

    if kind in (ShapeKind.ARRAY, ShapeKind.TUPLE):
        # Fixed length: drop extra elements, zero-fill missing ones
        if kind is ShapeKind.ARRAY:
            slots = [shape.items[0]] * shape.length
        else:
            slots = list(shape.items)

        items = []
        while reader.more():
            if len(items) < len(slots):
                items.append(_bind(reader.read_frame(), slots[len(items)], config, depth + 1))
            else:
                reader.read_frame()
        items.extend(zero_value(slot) for slot in slots[len(items):])
        return shape.python_type(items)

    element = shape.items[0] if kind is ShapeKind.LIST else DYNAMIC
    items = []
    while reader.more():
        items.append(_bind(reader.read_frame(), element, config, depth + 1))
    return items if kind is ShapeKind.DYNAMIC else shape.python_type(items)


_BINDERS = {
    Tag.STRING: _bind_string,
    Tag.INTEGER: _bind_integer,
    Tag.FLOAT: _bind_float,
    Tag.BOOLEAN: _bind_boolean,
    Tag.NULL: _bind_null,
    Tag.DICTIONARY: _bind_dictionary,
    Tag.LIST: _bind_list,
}
