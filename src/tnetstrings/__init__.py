"""tnetstrings: Tagged Netstrings Codec

A Python library for the tagged netstring serialization format. Every value
is encoded as a self-delimiting frame:

    SIZE ":" PAYLOAD TAG

where SIZE counts the payload bytes and TAG is one of ``, # ^ ! ~ } ]``
(string, integer, float, boolean, null, dictionary, list). A stream of
frames can be parsed without a schema and without scanning payloads for
delimiters.

Key Features:
- Dynamic decoding to plain Python values
- Typed decoding into annotations, pydantic models and dataclasses
- Field directives for wire names, exclusion and omit-if-empty
- Deterministic output (sorted mapping keys, fixed float format)

Quick Start:
    >>> from typing import Optional
    >>> from tnetstrings import BaseRecord, Tagged, decode, encode
    >>>
    >>> class Reading(BaseRecord):
    ...     sensor: str = Tagged("id")
    ...     value: float
    ...     unit: Optional[str] = Tagged("unit,omitempty", default=None)
    >>>
    >>> data = encode(Reading(sensor="t1", value=21.5))
    >>> decode(data)
    {'id': 't1', 'value': 21.5}
    >>> decode(data, Reading)
    Reading(sensor='t1', value=21.5, unit=None)
"""

from __future__ import annotations

from .codec import Decoder, Encoder, RecordSchema, decode, dump, encode, load
from .config import CodecConfig
from .exceptions import (
    CyclicValue,
    DecodeError,
    EncodeError,
    EndOfStream,
    FramingError,
    InvalidSizeChar,
    InvalidTypeTag,
    MalformedPayload,
    NestingTooDeep,
    NonStringKey,
    SchemaError,
    SizeLimitExceeded,
    TnetstringsError,
    TrailingData,
    TypeMismatch,
    UnexpectedEnd,
    UnknownField,
    UnsupportedType,
)
from .framing import Frame, FrameReader, Tag
from .models import (
    Array,
    BaseRecord,
    Float32,
    Float64,
    FloatWidth,
    Int8,
    Int16,
    Int32,
    Int64,
    IntWidth,
    Tagged,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode",
    "decode",
    "dump",
    "load",
    "Encoder",
    "Decoder",
    "CodecConfig",
    # Records
    "BaseRecord",
    "Tagged",
    "RecordSchema",
    # Target markers
    "Array",
    "IntWidth",
    "FloatWidth",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",
    # Framing
    "Tag",
    "Frame",
    "FrameReader",
    # Exceptions
    "TnetstringsError",
    "EndOfStream",
    "SchemaError",
    "NestingTooDeep",
    "FramingError",
    "InvalidSizeChar",
    "SizeLimitExceeded",
    "UnexpectedEnd",
    "DecodeError",
    "InvalidTypeTag",
    "TypeMismatch",
    "MalformedPayload",
    "UnknownField",
    "TrailingData",
    "EncodeError",
    "NonStringKey",
    "UnsupportedType",
    "CyclicValue",
    # Version
    "__version__",
]
