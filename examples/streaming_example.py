#!/usr/bin/env python3
"""Streaming example for tnetstrings.

This example demonstrates:
1. Writing several frames to one stream with an Encoder
2. Reading a typed header followed by dynamic frames with a Decoder
3. Detecting a truncated stream
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field

from tnetstrings import Decoder, Encoder, TnetstringsError, UInt16


@dataclass
class LogHeader:
    """Header written at the start of every log stream."""

    source: str = field(metadata={"tnetstrings": "src"})
    version: UInt16 = 1


def main() -> None:
    """Run the streaming example."""
    print("=" * 60)
    print("tnetstrings Streaming Example")
    print("=" * 60)
    print()

    # Write a header and a few events to one buffer
    print("1. Writing frames...")
    stream = io.BytesIO()
    encoder = Encoder(stream)
    encoder.encode(LogHeader(source="auv-7"))
    encoder.encode({"event": "dive", "depth": 12.5})
    encoder.encode({"event": "surface", "depth": 0.0})
    encoder.encode(["done", 3])
    data = stream.getvalue()
    print(f"   {len(data)} bytes: {data!r}")
    print()

    # Read them back
    print("2. Reading frames...")
    decoder = Decoder(io.BytesIO(data))
    header = decoder.decode(LogHeader)
    print(f"   header: {header!r}")
    for event in decoder:
        print(f"   event:  {event!r}")
    print(f"   consumed {decoder.offset} bytes")
    print()

    # Cut the stream short and read again
    print("3. Reading a truncated stream...")
    decoder = Decoder(io.BytesIO(data[:-5]))
    try:
        for event in decoder:
            print(f"   event:  {event!r}")
    except TnetstringsError as e:
        print(f"   ✗ {type(e).__name__}: {e}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
