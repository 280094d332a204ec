#!/usr/bin/env python3
"""Basic usage example for tnetstrings.

This example demonstrates:
1. Defining a record with Pydantic
2. Encoding to tagged netstring frames
3. Decoding back dynamically and into the record type
4. Using field directives and fixed-width targets
"""

from __future__ import annotations

from typing import Annotated, Optional

from tnetstrings import Array, BaseRecord, Float32, Tagged, UInt8, decode, encode


class StatusReport(BaseRecord):
    """Vehicle status report.

    Field directives control the keys used on the wire.
    """

    vehicle_id: UInt8 = Tagged("id")
    depth_m: Float32 = Tagged("depth")
    battery_pct: UInt8 = Tagged("battery")
    active: bool
    position: Annotated[list[float], Array(2)] = Tagged("pos")
    note: Optional[str] = Tagged("note,omitempty", default=None)
    session_key: str = Tagged("-", default="")


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("tnetstrings Basic Usage Example")
    print("=" * 60)
    print()

    # Create a record instance
    print("1. Creating a status report...")
    report = StatusReport(
        vehicle_id=42,
        depth_m=25.0,
        battery_pct=87,
        active=True,
        position=[47.6205, -122.3493],
        session_key="not-sent",
    )
    print(f"   {report!r}")
    print()

    # Encode the record
    print("2. Encoding...")
    data = encode(report)
    print(f"   Encoded size: {len(data)} bytes")
    print(f"   Frame: {data!r}")
    print()

    # Decode without a target
    print("3. Decoding dynamically...")
    print(f"   {decode(data)!r}")
    print()

    # Decode into the record type
    print("4. Decoding into StatusReport...")
    decoded = decode(data, StatusReport)
    print(f"   {decoded!r}")
    print(f"   session_key after decode: {decoded.session_key!r}")
    print()

    # Plain values work too
    print("5. Encoding plain values...")
    for value in ["hello", 12345, 1.5, None, [b"raw", False], {"b": 2, "a": 1}]:
        print(f"   {value!r:<24} -> {encode(value)!r}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
