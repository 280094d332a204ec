"""Field type helpers and utilities.

This module provides the field directive helper for records and the
``Annotated`` markers that give a decode target a fixed length or a
numeric width.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo

DIRECTIVE_KEY = "tnetstrings"


def Tagged(directive: str, **kwargs: Any) -> FieldInfo:
    """Create a record field carrying a wire directive.

    The directive is one of:
        - ``"name"``: use ``name`` as the wire key
        - ``"name,omitempty"``: as above, and skip the field when empty
        - ``",omitempty"``: keep the declared name, skip when empty
        - ``"-"``: never encode or decode this field

    Args:
        directive: Directive string
        **kwargs: Additional Field() arguments (default, description, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Status(BaseRecord):
        ...     vehicle_id: int = Tagged("id")
        ...     note: str = Tagged("note,omitempty", default="")
        ...     cache: dict = Tagged("-", default_factory=dict)

    For dataclasses, put the same string in the field metadata:
    ``field(metadata={"tnetstrings": "id"})``.
    """
    return cast(FieldInfo, Field(json_schema_extra={DIRECTIVE_KEY: directive}, **kwargs))


@dataclass(frozen=True)
class Array:
    """Fixed-length sequence marker.

    A list target annotated with Array(n) always decodes to exactly ``n``
    elements: extra wire elements are dropped and missing ones are filled
    with the element type's zero value.

    Example:
        >>> Position = Annotated[list[float], Array(3)]
    """

    length: int

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError(f"Array length must be non-negative, got {self.length}")


@dataclass(frozen=True)
class IntWidth:
    """Integer width marker for decode targets.

    Attributes:
        bits: Number of bits (8, 16, 32 or 64)
        signed: Whether the integer is signed
    """

    bits: int
    signed: bool = True

    def __post_init__(self) -> None:
        if self.bits not in (8, 16, 32, 64):
            raise ValueError(f"bits must be 8, 16, 32 or 64, got {self.bits}")

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


@dataclass(frozen=True)
class FloatWidth:
    """Float width marker for decode targets (32 or 64 bits)."""

    bits: int

    def __post_init__(self) -> None:
        if self.bits not in (32, 64):
            raise ValueError(f"bits must be 32 or 64, got {self.bits}")


INT64 = IntWidth(64)

Int8 = Annotated[int, IntWidth(8)]
Int16 = Annotated[int, IntWidth(16)]
Int32 = Annotated[int, IntWidth(32)]
Int64 = Annotated[int, INT64]
UInt8 = Annotated[int, IntWidth(8, signed=False)]
UInt16 = Annotated[int, IntWidth(16, signed=False)]
UInt32 = Annotated[int, IntWidth(32, signed=False)]
UInt64 = Annotated[int, IntWidth(64, signed=False)]
Float32 = Annotated[float, FloatWidth(32)]
Float64 = Annotated[float, FloatWidth(64)]
