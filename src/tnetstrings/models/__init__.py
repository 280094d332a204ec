"""Record modeling for tnetstrings.

This module provides the BaseRecord class and the field helpers used to
describe record fields and typed decode targets.
"""

from __future__ import annotations

from .base import BaseRecord
from .fields import (
    Array,
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

__all__ = [
    "BaseRecord",
    "Tagged",
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
]
