"""Tagged netstring encoder.

This module provides the Encoder class and the encode()/dump() helpers that
convert Python values to frames. Composite values are encoded into a scratch
buffer first so their size prefix is known before anything reaches the sink.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Optional

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import CyclicValue, EncodeError, NestingTooDeep, NonStringKey, UnsupportedType
from ..framing import ByteSink, Tag, frame, write_frame
from .schema import RecordSchema, is_record

logger = logging.getLogger(__name__)

TRUE_FRAME = frame(Tag.BOOLEAN, b"true")
FALSE_FRAME = frame(Tag.BOOLEAN, b"false")
NULL_FRAME = frame(Tag.NULL, b"")


class Encoder:
    """Encoder writing frames to a binary sink.

    Each encode() call writes exactly one top-level frame with a single
    write() on the sink. Errors leave the sink untouched.

    Example:
        ```python
        with open("events.tns", "wb") as f:
            encoder = Encoder(f)
            encoder.encode(header)
            for event in events:
                encoder.encode(event)
        ```
    """

    def __init__(self, sink: ByteSink, config: Optional[CodecConfig] = None) -> None:
        """Initialize an encoder.

        Args:
            sink: Object with a binary write() method
            config: Codec configuration (defaults to CodecConfig())
        """
        self._sink = sink
        self.config = config or DEFAULT_CONFIG

    def encode(self, value: Any) -> None:
        """Encode ``value`` and write it to the sink.

        Args:
            value: Value to encode

        Raises:
            NonStringKey: If a mapping has a key that is not a str
            UnsupportedType: If a value's type has no wire mapping
            CyclicValue: If a container contains itself
            NestingTooDeep: If the value nests deeper than config.max_depth
        """
        _encode_value(self._sink, value, self.config, 0, set())
        logger.debug("Encoded %s value", type(value).__name__)


def encode(value: Any, *, config: Optional[CodecConfig] = None) -> bytes:
    """Encode a value to bytes.

    Mapping keys are written in sorted order and floats with six fractional
    digits, so equal values always produce identical bytes.

    Args:
        value: Value to encode
        config: Codec configuration

    Returns:
        One encoded frame

    Examples:
        ```python
        from tnetstrings import encode

        encode("hello")                 # b"5:hello,"
        encode(1.0)                     # b"8:1.000000^"
        encode({"foo": None, "bar": 1})  # b"19:3:bar,1:1#3:foo,0:~}"
        encode([b"abc", True])          # b"13:3:abc,4:true!]"
        ```
    """
    buffer = io.BytesIO()
    Encoder(buffer, config).encode(value)
    return buffer.getvalue()


def dump(value: Any, sink: ByteSink, *, config: Optional[CodecConfig] = None) -> None:
    """Encode a value and write it to ``sink``."""
    Encoder(sink, config).encode(value)


def _encode_value(
    sink: ByteSink, value: Any, config: CodecConfig, depth: int, active: set[int]
) -> None:
    """Write one value as a frame.

    Args:
        sink: Destination for the frame
        value: Value to encode
        config: Codec configuration
        depth: Number of enclosing containers
        active: ids of the containers currently being encoded
    """
    if value is None:
        sink.write(NULL_FRAME)
        return

    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        sink.write(TRUE_FRAME if value else FALSE_FRAME)
        return

    if isinstance(value, int):
        write_frame(sink, Tag.INTEGER, b"%d" % value)
        return

    if isinstance(value, float):
        write_frame(sink, Tag.FLOAT, b"%f" % value)
        return

    if isinstance(value, str):
        try:
            payload = value.encode(config.encoding)
        except UnicodeEncodeError as e:
            raise EncodeError(f"Cannot encode string as {config.encoding}: {e}") from e
        write_frame(sink, Tag.STRING, payload)
        return

    # Raw bytes are a string payload, not a list of small integers
    if isinstance(value, (bytes, bytearray, memoryview)):
        write_frame(sink, Tag.STRING, bytes(value))
        return

    if isinstance(value, Mapping):
        _encode_container(sink, value, Tag.DICTIONARY, _write_mapping, config, depth, active)
        return

    if is_record(value):
        _encode_container(sink, value, Tag.DICTIONARY, _write_record, config, depth, active)
        return

    if isinstance(value, Sequence):
        _encode_container(sink, value, Tag.LIST, _write_sequence, config, depth, active)
        return

    raise UnsupportedType(type(value))


def _encode_container(
    sink: ByteSink,
    value: Any,
    tag: Tag,
    write_items: Callable[..., None],
    config: CodecConfig,
    depth: int,
    active: set[int],
) -> None:
    marker = id(value)
    if marker in active:
        raise CyclicValue(type(value))
    if depth >= config.max_depth:
        raise NestingTooDeep(config.max_depth)

    active.add(marker)
    scratch = io.BytesIO()
    write_items(scratch, value, config, depth + 1, active)
    active.discard(marker)

    write_frame(sink, tag, scratch.getvalue())


def _write_mapping(
    scratch: io.BytesIO, value: Mapping, config: CodecConfig, depth: int, active: set[int]
) -> None:
    keys = list(value.keys())
    for key in keys:
        if not isinstance(key, str):
            raise NonStringKey(key)

    for key in sorted(keys):
        _encode_value(scratch, key, config, depth, active)
        _encode_value(scratch, value[key], config, depth, active)


def _write_record(
    scratch: io.BytesIO, value: Any, config: CodecConfig, depth: int, active: set[int]
) -> None:
    schema = RecordSchema.from_type(type(value))
    for display_name, field_value in schema.wire_items(value):
        _encode_value(scratch, display_name, config, depth, active)
        _encode_value(scratch, field_value, config, depth, active)


def _write_sequence(
    scratch: io.BytesIO, value: Sequence, config: CodecConfig, depth: int, active: set[int]
) -> None:
    for item in value:
        _encode_value(scratch, item, config, depth, active)
