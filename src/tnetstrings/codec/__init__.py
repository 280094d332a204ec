"""Tagged netstring codec.

This module provides encoding and decoding between Python values and the
SIZE ":" PAYLOAD TAG wire format.
"""

from __future__ import annotations

from .decoder import Decoder, decode, load
from .encoder import Encoder, dump, encode
from .schema import FieldSchema, RecordSchema, parse_directive
from .shapes import Shape, ShapeKind, shape_of

__all__ = [
    "encode",
    "decode",
    "dump",
    "load",
    "Encoder",
    "Decoder",
    "RecordSchema",
    "FieldSchema",
    "parse_directive",
    "Shape",
    "ShapeKind",
    "shape_of",
]
