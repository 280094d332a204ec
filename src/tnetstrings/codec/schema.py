"""Record schema introspection.

This module resolves, for each field of a record type (a pydantic model or a
dataclass), its wire display name and its omit-if-empty and exclusion flags.
The encoder and decoder both go through RecordSchema, so a record always
reads back the keys it writes.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from typing import Annotated, Any, Iterator, List, Optional, Type, get_type_hints

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from ..exceptions import DecodeError, SchemaError, UnknownField
from ..models.fields import DIRECTIVE_KEY
from .shapes import Shape, shape_of, zero_value

OMIT_EMPTY = "omitempty"
EXCLUDE = "-"


@dataclass(frozen=True)
class FieldSchema:
    """Wire information for a single record field.

    Attributes:
        name: Attribute name on the record
        display_name: Key used on the wire
        annotation: Type annotation, including any Annotated metadata
        omit_empty: Skip the field when encoding an empty value
        excluded: Never encode or decode the field
        has_default: Whether the record type supplies a default for the field
        init: Whether the field is a constructor argument
    """

    name: str
    display_name: str
    annotation: Any
    omit_empty: bool = False
    excluded: bool = False
    has_default: bool = False
    init: bool = True

    @property
    def shape(self) -> Shape:
        return shape_of(self.annotation)


def parse_directive(name: str, directive: Optional[str]) -> tuple[str, bool, bool]:
    """Parse a field directive.

    Args:
        name: Declared field name
        directive: Directive string, or None if the field has none

    Returns:
        Tuple of (display_name, omit_empty, excluded)

    Examples:
        >>> parse_directive("Field", None)
        ('Field', False, False)
        >>> parse_directive("Field", "myName,omitempty")
        ('myName', True, False)
        >>> parse_directive("Field", "-")
        ('Field', False, True)
        >>> parse_directive("Field", "-,")
        ('-', False, False)
    """
    if directive is None:
        return name, False, False

    if directive == EXCLUDE:
        return name, False, True

    parts = directive.split(",")
    display_name = parts[0] or name
    omit_empty = OMIT_EMPTY in parts[1:]
    return display_name, omit_empty, False


def is_empty(value: Any) -> bool:
    """Return True if ``value`` is its type's zero/empty value.

    None, False, numeric zero and empty strings, bytes and containers are
    empty. Records are never empty.
    """
    if value is None:
        return True
    if isinstance(value, (bool, int, float)):
        return not value
    if isinstance(value, (str, bytes, bytearray, memoryview, Mapping, Sequence, Set)):
        return len(value) == 0
    return False


def is_record(value: Any) -> bool:
    """Return True if ``value`` is a pydantic model or dataclass instance."""
    if isinstance(value, BaseModel):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


class RecordSchema:
    """Schema information for a record type.

    Built once per type and cached.

    Example:
        >>> schema = RecordSchema.from_type(Reading)
        >>> for field in schema.fields:
        ...     print(field.name, "->", field.display_name)
    """

    _cache: dict[type, RecordSchema] = {}

    def __init__(self, record_type: Type[Any]) -> None:
        """Initialize schema from a record type.

        Args:
            record_type: Pydantic model class or dataclass type
        """
        self.record_type = record_type
        self.fields: List[FieldSchema] = []
        self._by_display_name: dict[str, FieldSchema] = {}
        self._introspect()

    @classmethod
    def from_type(cls, record_type: Type[Any]) -> RecordSchema:
        """Return the (cached) schema for a record type.

        Raises:
            SchemaError: If the type is not a record type or two fields share
                a display name
        """
        schema = cls._cache.get(record_type)
        if schema is None:
            schema = cls(record_type)
            cls._cache[record_type] = schema
        return schema

    def _introspect(self) -> None:
        if isinstance(self.record_type, type) and issubclass(self.record_type, BaseModel):
            fields = [
                self._from_model_field(name, info)
                for name, info in self.record_type.model_fields.items()
            ]
        elif dataclasses.is_dataclass(self.record_type):
            hints = get_type_hints(self.record_type, include_extras=True)
            fields = [
                self._from_dataclass_field(field, hints[field.name])
                for field in dataclasses.fields(self.record_type)
            ]
        else:
            raise SchemaError(f"{self.record_type!r} is not a pydantic model or dataclass")

        for field_schema in fields:
            self.fields.append(field_schema)
            if field_schema.excluded:
                continue
            if field_schema.display_name in self._by_display_name:
                raise SchemaError(
                    f"{self.record_type.__name__}: display name "
                    f"{field_schema.display_name!r} used by more than one field"
                )
            self._by_display_name[field_schema.display_name] = field_schema

    @staticmethod
    def _from_model_field(name: str, info: FieldInfo) -> FieldSchema:
        # Pydantic strips top-level Annotated metadata into info.metadata
        annotation = info.annotation
        if info.metadata:
            annotation = Annotated[(annotation, *info.metadata)]

        directive = None
        if isinstance(info.json_schema_extra, dict):
            directive = info.json_schema_extra.get(DIRECTIVE_KEY)

        display_name, omit_empty, excluded = parse_directive(name, directive)
        return FieldSchema(
            name=name,
            display_name=display_name,
            annotation=annotation,
            omit_empty=omit_empty,
            excluded=excluded,
            has_default=not info.is_required(),
        )

    @staticmethod
    def _from_dataclass_field(field: dataclasses.Field, annotation: Any) -> FieldSchema:
        display_name, omit_empty, excluded = parse_directive(
            field.name, field.metadata.get(DIRECTIVE_KEY)
        )
        # Underscore-prefixed dataclass fields are private
        excluded = excluded or field.name.startswith("_")
        has_default = (
            field.default is not dataclasses.MISSING
            or field.default_factory is not dataclasses.MISSING
        )
        return FieldSchema(
            name=field.name,
            display_name=display_name,
            annotation=annotation,
            omit_empty=omit_empty,
            excluded=excluded,
            has_default=has_default,
            init=field.init,
        )

    def lookup(self, display_name: str) -> FieldSchema:
        """Resolve a wire key to its field.

        Raises:
            UnknownField: If no included field has this display name
        """
        try:
            return self._by_display_name[display_name]
        except KeyError:
            raise UnknownField(display_name, self.record_type) from None

    def wire_items(self, record: Any) -> Iterator[tuple[str, Any]]:
        """Yield (display_name, value) for each field to encode, in declaration order."""
        for field_schema in self.fields:
            if field_schema.excluded:
                continue
            value = getattr(record, field_schema.name)
            if field_schema.omit_empty and is_empty(value):
                continue
            yield field_schema.display_name, value

    def build(self, values: dict[str, Any]) -> Any:
        """Construct a record from decoded field values.

        Fields missing from ``values`` take their declared default, or their
        type's zero value when they have none.

        Args:
            values: Decoded values keyed by attribute name

        Returns:
            Record instance

        Raises:
            DecodeError: If the record type rejects the values
        """
        kwargs: dict[str, Any] = {}
        late: dict[str, Any] = {}

        for field_schema in self.fields:
            if field_schema.name in values:
                value = values[field_schema.name]
            elif field_schema.has_default:
                continue
            else:
                value = zero_value(field_schema.shape)

            if field_schema.init:
                kwargs[field_schema.name] = value
            else:
                late[field_schema.name] = value

        try:
            record = self.record_type(**kwargs)
        except (ValidationError, TypeError, ValueError) as e:
            raise DecodeError(f"Failed to construct {self.record_type.__name__}: {e}") from e

        for name, value in late.items():
            # Bypasses frozen dataclasses' __setattr__
            object.__setattr__(record, name, value)

        return record

    def zero(self) -> Any:
        """Construct the zero value of this record type."""
        return self.build({})
