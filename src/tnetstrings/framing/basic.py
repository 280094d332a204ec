"""Frame reading and writing.

Every value on the wire is one frame:

    SIZE ":" PAYLOAD TAG

SIZE is 1-10 ASCII digits giving the payload length in bytes and TAG is a
single byte selecting how the payload is interpreted. This module knows
nothing about payload semantics; it only splits a byte source into
(tag, payload) pairs and joins them back together.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import BinaryIO, Optional, Protocol

from ..exceptions import (
    EndOfStream,
    InvalidSizeChar,
    InvalidTypeTag,
    SizeLimitExceeded,
    UnexpectedEnd,
)

SIZE_DIGIT_LIMIT = 10
COLON = ord(":")

# Payload reads never request more than this from the source at once, so a
# bogus size field only costs as much memory as the source actually delivers.
READ_CHUNK_SIZE = 64 * 1024


class Tag(enum.IntEnum):
    """Type tags, by their byte value."""

    STRING = ord(",")
    INTEGER = ord("#")
    FLOAT = ord("^")
    BOOLEAN = ord("!")
    NULL = ord("~")
    DICTIONARY = ord("}")
    LIST = ord("]")


TAGS = frozenset(Tag)


class ByteSink(Protocol):
    """Anything with a binary write(), such as a file or io.BytesIO."""

    def write(self, data: bytes, /) -> object: ...


@dataclass(frozen=True)
class Frame:
    """One decoded SIZE:PAYLOAD TAG unit.

    Attributes:
        tag: Type tag
        payload: Payload bytes (exactly ``size`` of them)
    """

    tag: Tag
    payload: bytes

    @property
    def size(self) -> int:
        return len(self.payload)


class FrameReader:
    """Reads frames one at a time from a binary source.

    The source only needs a ``read(n)`` method that returns ``b""`` at end of
    data, like a file opened in binary mode, ``socket.makefile("rb")`` or
    ``io.BytesIO``. Short reads are retried until the requested count arrives
    or the source is exhausted.

    The reader never consumes more than one frame per read_frame() call, except
    for the single byte of look-ahead that more() may hold back.

    Example:
        >>> reader = FrameReader(io.BytesIO(b"5:hello,0:~"))
        >>> reader.read_frame()
        Frame(tag=<Tag.STRING: 44>, payload=b'hello')
        >>> reader.read_frame().tag is Tag.NULL
        True
        >>> reader.more()
        False
    """

    def __init__(self, source: BinaryIO) -> None:
        self._source = source
        self._pending = b""
        self.offset = 0

    def more(self) -> bool:
        """Return True if at least one more byte is available."""
        if self._pending:
            return True
        self._pending = self._source.read(1)
        return bool(self._pending)

    def read_byte(self) -> Optional[int]:
        """Read a single byte, or return None at end of input."""
        data = self.read_upto(1)
        return data[0] if data else None

    def read_upto(self, count: int) -> bytes:
        """Read ``count`` bytes, returning fewer only if the source runs dry.

        Args:
            count: Number of bytes wanted

        Returns:
            The bytes read
        """
        chunks = []
        remaining = count

        if self._pending and remaining > 0:
            chunks.append(self._pending)
            remaining -= len(self._pending)
            self._pending = b""

        while remaining > 0:
            chunk = self._source.read(min(remaining, READ_CHUNK_SIZE))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)

        data = b"".join(chunks)
        self.offset += len(data)
        return data

    def read_size(self) -> int:
        """Read the SIZE ":" prefix of a frame.

        Returns:
            Declared payload size in bytes

        Raises:
            EndOfStream: If the input ends before the first size byte
            UnexpectedEnd: If the input ends inside the size field
            InvalidSizeChar: If a byte other than a digit or ':' appears,
                or ':' appears with no digits before it
            SizeLimitExceeded: If more than 10 digits appear before ':'
        """
        size = 0
        digits = 0

        while True:
            position = self.offset
            byte = self.read_byte()

            if byte is None:
                if digits == 0:
                    raise EndOfStream(f"end of input at offset {position}")
                raise UnexpectedEnd(expected=1, received=0)

            if byte == COLON:
                if digits == 0:
                    raise InvalidSizeChar(byte, position)
                return size

            if not 0x30 <= byte <= 0x39:
                raise InvalidSizeChar(byte, position)

            if digits == SIZE_DIGIT_LIMIT:
                raise SizeLimitExceeded(position)

            size = size * 10 + (byte - 0x30)
            digits += 1

    def read_frame(self) -> Frame:
        """Read one complete frame.

        Returns:
            The frame's tag and payload

        Raises:
            EndOfStream: If the input ends cleanly before the frame starts
            FramingError: If the size field is malformed or the input ends
                before SIZE payload bytes plus the tag byte are available
            InvalidTypeTag: If the byte after the payload is not a known tag
        """
        size = self.read_size()

        # Payload and tag in one bounded read
        data = self.read_upto(size + 1)
        if len(data) < size + 1:
            raise UnexpectedEnd(expected=size + 1, received=len(data))

        tag = data[-1]
        if tag not in TAGS:
            raise InvalidTypeTag(tag)

        return Frame(tag=Tag(tag), payload=data[:-1])


def frame(tag: Tag, payload: bytes) -> bytes:
    """Build a single frame in memory.

    Example:
        >>> frame(Tag.STRING, b"hello")
        b'5:hello,'
    """
    return b"%d:%s%c" % (len(payload), payload, tag)


def write_frame(sink: ByteSink, tag: Tag, payload: bytes) -> None:
    """Write a single frame to ``sink``.

    Args:
        sink: Object with a binary write() method
        tag: Type tag to append
        payload: Payload bytes
    """
    sink.write(frame(tag, payload))
