"""Decode target classification.

A decode target is any type annotation: ``str``, ``Optional[int]``,
``list[Reading]``, ``Annotated[list[float], Array(3)]``, a pydantic model, and
so on. This module reduces an annotation once to a Shape, a small closed
description the decoder can dispatch on without further introspection.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import enum
import types
from dataclasses import dataclass
from typing import Annotated, Any, Optional, Union, get_args, get_origin

from pydantic import BaseModel

from ..exceptions import SchemaError
from ..models.fields import INT64, Array, FloatWidth, IntWidth


class ShapeKind(enum.Enum):
    """The kinds of decode target."""

    DYNAMIC = "dynamic"
    STRING = "string"
    BYTES = "bytes"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    OPTIONAL = "optional"
    LIST = "list"
    TUPLE = "tuple"
    ARRAY = "array"
    MAPPING = "mapping"
    RECORD = "record"


@dataclass(frozen=True)
class Shape:
    """Classified decode target.

    Attributes:
        kind: Shape kind
        target: The annotation this shape was built from (for error messages)
        python_type: Concrete type to build (bytes/bytearray, list/tuple, record class)
        items: Nested shapes: the inner shape for OPTIONAL, the element shape
            for LIST and ARRAY, the value shape for MAPPING, one shape per
            position for TUPLE
        length: Fixed length for ARRAY
        int_width: Accepted range for INTEGER
        float_bits: Precision for FLOAT (32 or 64)
    """

    kind: ShapeKind
    target: Any
    python_type: Optional[type] = None
    items: tuple[Shape, ...] = ()
    length: Optional[int] = None
    int_width: IntWidth = INT64
    float_bits: int = 64


DYNAMIC = Shape(ShapeKind.DYNAMIC, Any)
STRING = Shape(ShapeKind.STRING, str)

_SEQUENCE_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
_UNION_ORIGINS = (Union, types.UnionType)

_cache: dict[Any, Shape] = {}


def is_record_type(target: Any) -> bool:
    """Return True if ``target`` is a pydantic model class or dataclass type."""
    if not isinstance(target, type):
        return False
    return issubclass(target, BaseModel) or dataclasses.is_dataclass(target)


def shape_of(target: Any) -> Shape:
    """Classify a decode target annotation.

    Results are cached per annotation; unhashable annotations are classified
    on every call.

    Args:
        target: Type annotation

    Returns:
        Shape describing the target

    Raises:
        SchemaError: If the annotation has no wire mapping
    """
    try:
        return _cache[target]
    except KeyError:
        pass
    except TypeError:
        return _classify(target)

    shape = _classify(target)
    _cache[target] = shape
    return shape


def _classify(target: Any) -> Shape:
    base = target
    metadata: tuple[Any, ...] = ()
    if get_origin(target) is Annotated:
        base, *extra = get_args(target)
        metadata = tuple(extra)

    if base is Any or base is object:
        return DYNAMIC

    origin = get_origin(base)
    args = get_args(base)

    # Optional[T] / T | None
    if origin in _UNION_ORIGINS:
        members = [arg for arg in args if arg is not type(None)]
        if len(members) != 1 or len(members) == len(args):
            raise SchemaError(f"Only Optional[T] unions can be decoded, got {target!r}")
        return Shape(ShapeKind.OPTIONAL, target, items=(shape_of(members[0]),))

    if base is str:
        return Shape(ShapeKind.STRING, target)

    if base is bytes or base is bytearray:
        return Shape(ShapeKind.BYTES, target, python_type=base)

    # bool before int: bool is an int subclass
    if base is bool:
        return Shape(ShapeKind.BOOLEAN, target)

    if base is int:
        width = _find(metadata, IntWidth) or INT64
        return Shape(ShapeKind.INTEGER, target, int_width=width)

    if base is float:
        float_width = _find(metadata, FloatWidth)
        return Shape(ShapeKind.FLOAT, target, float_bits=float_width.bits if float_width else 64)

    if base is list or origin in _SEQUENCE_ORIGINS:
        element = shape_of(args[0]) if args else DYNAMIC
        return _sequence_shape(target, list, element, metadata)

    if base is tuple or origin is tuple:
        if not args:
            return _sequence_shape(target, tuple, DYNAMIC, metadata)
        if len(args) == 2 and args[1] is Ellipsis:
            return _sequence_shape(target, tuple, shape_of(args[0]), metadata)
        positions = tuple(shape_of(arg) for arg in args)
        return Shape(ShapeKind.TUPLE, target, python_type=tuple, items=positions, length=len(args))

    if base is dict or origin in _MAPPING_ORIGINS:
        key_type, value_type = args if args else (str, Any)
        if key_type is not str and key_type is not Any:
            raise SchemaError(f"Mapping keys must be str, got {key_type!r} in {target!r}")
        return Shape(ShapeKind.MAPPING, target, python_type=dict, items=(shape_of(value_type),))

    if is_record_type(base):
        return Shape(ShapeKind.RECORD, target, python_type=base)

    raise SchemaError(f"Unsupported decode target: {target!r}")


def _sequence_shape(target: Any, python_type: type, element: Shape, metadata: tuple) -> Shape:
    array = _find(metadata, Array)
    if array is not None:
        return Shape(
            ShapeKind.ARRAY, target, python_type=python_type, items=(element,), length=array.length
        )
    return Shape(ShapeKind.LIST, target, python_type=python_type, items=(element,))


def _find(metadata: tuple[Any, ...], marker: type) -> Any:
    for item in metadata:
        if isinstance(item, marker):
            return item
    return None


def zero_value(shape: Shape) -> Any:
    """Return the zero/empty value for a decode target.

    Used to fill fixed-length arrays and record fields that are absent on
    the wire.
    """
    kind = shape.kind

    if kind in (ShapeKind.DYNAMIC, ShapeKind.OPTIONAL):
        return None
    if kind is ShapeKind.STRING:
        return ""
    if kind is ShapeKind.BYTES:
        return shape.python_type()
    if kind is ShapeKind.INTEGER:
        return 0
    if kind is ShapeKind.FLOAT:
        return 0.0
    if kind is ShapeKind.BOOLEAN:
        return False
    if kind is ShapeKind.LIST:
        return shape.python_type()
    if kind is ShapeKind.ARRAY:
        return shape.python_type(zero_value(shape.items[0]) for _ in range(shape.length))
    if kind is ShapeKind.TUPLE:
        return tuple(zero_value(item) for item in shape.items)
    if kind is ShapeKind.MAPPING:
        return {}

    # Import here to avoid circular dependency
    from .schema import RecordSchema

    return RecordSchema.from_type(shape.python_type).zero()
