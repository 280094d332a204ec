"""Exception hierarchy for tnetstrings.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from TnetstringsError for easy catching of any
tnetstrings-specific error.
"""

from __future__ import annotations

from typing import Any


class TnetstringsError(Exception):
    """Base exception for all tnetstrings errors."""

    pass


class EndOfStream(TnetstringsError):
    """Raised when the input ends cleanly before a new frame starts.

    This is not a malformed-input condition: it marks the boundary between the
    last complete frame of a stream and the end of the source.
    """

    pass


class SchemaError(TnetstringsError):
    """Raised when a decode target or record type cannot be mapped to the wire format.

    Examples:
        - Union with more than one non-None member
        - Mapping annotation with a non-str key type
        - Two record fields resolving to the same display name
    """

    pass


class NestingTooDeep(TnetstringsError):
    """Raised when a value or frame nests deeper than the configured limit."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"nesting exceeds maximum depth of {limit}")


# Framing errors


class FramingError(TnetstringsError):
    """Raised when the SIZE ':' PAYLOAD TAG structure itself is broken.

    Examples:
        - Non-digit byte in the size field
        - Size field longer than 10 digits
        - Declared size larger than the remaining input
    """

    pass


class InvalidSizeChar(FramingError):
    """Raised when the size field contains something other than ASCII digits."""

    def __init__(self, char: int, offset: int) -> None:
        self.char = char
        self.offset = offset
        super().__init__(f"invalid size character {bytes([char])!r} at offset {offset}")


class SizeLimitExceeded(FramingError):
    """Raised when no ':' follows within the maximum number of size digits."""

    def __init__(self, offset: int) -> None:
        self.offset = offset
        super().__init__(f"size limit exceeded at offset {offset}")


class UnexpectedEnd(FramingError):
    """Raised when the input ends inside a frame."""

    def __init__(self, expected: int, received: int) -> None:
        self.expected = expected
        self.received = received
        super().__init__(f"unexpected end of input: expected {expected} bytes, got {received}")


# Decode errors


class DecodeError(TnetstringsError):
    """Raised when a well-framed value cannot be bound to the requested target.

    Examples:
        - Unknown type tag
        - Tag incompatible with the target type
        - Malformed integer, float or boolean payload
        - Dictionary key with no matching record field
    """

    pass


class InvalidTypeTag(DecodeError):
    """Raised when the trailing byte of a frame is not one of the seven tags."""

    def __init__(self, tag: int) -> None:
        self.tag = tag
        super().__init__(f"invalid type tag {bytes([tag])!r}")


class TypeMismatch(DecodeError):
    """Raised when a valid tag cannot be decoded into the requested target."""

    def __init__(self, tag: int, target: Any) -> None:
        self.tag = tag
        self.target = target
        super().__init__(f"type mismatch: {chr(tag)}, {_type_name(target)}")


class MalformedPayload(DecodeError):
    """Raised when a payload does not match the grammar its tag promises."""

    def __init__(self, tag: int, payload: bytes, reason: str) -> None:
        self.tag = tag
        self.payload = payload
        self.reason = reason
        super().__init__(f"malformed {chr(tag)} payload {payload[:32]!r}: {reason}")


class UnknownField(DecodeError):
    """Raised when a dictionary key does not resolve to a field of the target record."""

    def __init__(self, key: str, record: type) -> None:
        self.key = key
        self.record = record
        super().__init__(f"{record.__name__} has no field with display name {key!r}")


class TrailingData(DecodeError):
    """Raised when bytes remain after decoding a single top-level frame."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"{count} trailing bytes after frame")


# Encode errors


class EncodeError(TnetstringsError):
    """Raised when a value cannot be encoded.

    Examples:
        - Mapping key that is not a str
        - Value type with no wire mapping (set, complex, arbitrary object)
        - Container that references itself
    """

    pass


class NonStringKey(EncodeError):
    """Raised when a mapping to encode has a key that is not a str."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"non string key: {key!r} ({type(key).__name__})")


class UnsupportedType(EncodeError):
    """Raised when a value's type has no wire mapping."""

    def __init__(self, python_type: type) -> None:
        self.python_type = python_type
        super().__init__(f"unsupported type: {_type_name(python_type)}")


class CyclicValue(EncodeError):
    """Raised when a container contains itself, directly or indirectly."""

    def __init__(self, python_type: type) -> None:
        self.python_type = python_type
        super().__init__(f"cyclic reference through {_type_name(python_type)}")


def _type_name(target: Any) -> str:
    if isinstance(target, type):
        return target.__qualname__
    return repr(target)
