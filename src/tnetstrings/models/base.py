"""Base record class and tnetstrings-specific Pydantic configuration.

Any pydantic model (and any dataclass) can be encoded and decoded as a
record. BaseRecord adds a configuration suited to wire records and the
``to_tnetstring``/``from_tnetstring`` convenience methods.
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, ConfigDict

R = TypeVar("R", bound="BaseRecord")


class BaseRecord(BaseModel):
    """Base class for tnetstrings records.

    Fields are encoded in declaration order, each under its display name.
    Use Tagged() to rename, exclude or omit-if-empty a field.

    Example:
        >>> from typing import Optional
        >>> class Reading(BaseRecord):
        ...     sensor: str = Tagged("id")
        ...     value: float
        ...     unit: Optional[str] = Tagged("unit,omitempty", default=None)
        >>> data = Reading(sensor="t1", value=21.5).to_tnetstring()
        >>> data
        b'30:2:id,2:t1,5:value,9:21.500000^}'
        >>> Reading.from_tnetstring(data).value
        21.5
    """

    model_config = ConfigDict(
        # Frames carry exact types; no str -> int style coercion
        strict=True,
        # Allow arbitrary types (for nested dataclasses)
        arbitrary_types_allowed=True,
        # Validate on assignment
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    def to_tnetstring(self) -> bytes:
        """Encode this record as a single dictionary frame."""
        from ..codec import encode

        return encode(self)

    @classmethod
    def from_tnetstring(cls: type[R], data: bytes) -> R:
        """Decode a single dictionary frame into an instance of this class."""
        from ..codec import decode

        return decode(data, cls)
