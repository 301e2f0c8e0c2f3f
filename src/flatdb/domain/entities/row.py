"""Typed values and rows."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

from flatdb.domain.value_objects import FieldType

Payload = Union[int, float, str, bool]


@dataclass(frozen=True, slots=True)
class TypedValue:
    """A value tagged with its field type.

    The payload always matches the tag: ``int`` for INTEGER, ``float`` for
    NUMBER, ``str`` for STRING and ``bool`` for BOOLEAN.
    """

    type: FieldType
    value: Payload

    def __post_init__(self) -> None:
        if not _payload_matches(self.type, self.value):
            raise TypeError(
                f"{type(self.value).__name__} payload {self.value!r} "
                f"does not match field type {self.type.name}"
            )

    @classmethod
    def integer(cls, value: int) -> TypedValue:
        return cls(FieldType.INTEGER, value)

    @classmethod
    def number(cls, value: float) -> TypedValue:
        return cls(FieldType.NUMBER, float(value))

    @classmethod
    def string(cls, value: str) -> TypedValue:
        return cls(FieldType.STRING, value)

    @classmethod
    def boolean(cls, value: bool) -> TypedValue:
        return cls(FieldType.BOOLEAN, value)


def _payload_matches(field_type: FieldType, value: object) -> bool:
    if field_type is FieldType.BOOLEAN:
        return isinstance(value, bool)
    if field_type is FieldType.INTEGER:
        return isinstance(value, int) and not isinstance(value, bool)
    if field_type is FieldType.NUMBER:
        return isinstance(value, float)
    if field_type is FieldType.STRING:
        return isinstance(value, str)
    return False


@dataclass(frozen=True)
class Row:
    """One stored row: its index plus one value per schema column."""

    index: int
    values: tuple[TypedValue, ...]

    @property
    def field_count(self) -> int:
        return len(self.values)

    def with_value(self, position: int, value: TypedValue) -> Row:
        """Return a copy of this row with one value replaced."""
        values = list(self.values)
        values[position] = value
        return replace(self, values=tuple(values))

    def payloads(self) -> list[Payload]:
        """Plain Python values, in column order."""
        return [value.value for value in self.values]

    def __getitem__(self, position: int) -> TypedValue:
        return self.values[position]

    def __len__(self) -> int:
        return len(self.values)
