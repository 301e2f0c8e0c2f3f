"""Keyword and type-name classification.

Both tables are sorted by name so lookups can use binary search; lookups
are exact and case-sensitive.
"""

from __future__ import annotations

from bisect import bisect_left
from typing import TypeVar

from flatdb.domain.value_objects.query_types import FieldType, QueryKind

T = TypeVar("T")

COMMAND_NAMES: tuple[tuple[str, QueryKind], ...] = (
    ("DATASET", QueryKind.CREATE),
    ("DELETE", QueryKind.DELETE),
    ("INSERT_INTO", QueryKind.INSERT),
    ("SELECT", QueryKind.SELECT),
    ("UPDATE", QueryKind.UPDATE),
)

TYPE_NAMES: tuple[tuple[str, FieldType], ...] = (
    ("BOOLEAN", FieldType.BOOLEAN),
    ("INTEGER", FieldType.INTEGER),
    ("NUMBER", FieldType.NUMBER),
    ("STRING", FieldType.STRING),
)

_COMMAND_KEYS = tuple(name for name, _ in COMMAND_NAMES)
_TYPE_KEYS = tuple(name for name, _ in TYPE_NAMES)


def _lookup(word: str, keys: tuple[str, ...], table: tuple[tuple[str, T], ...]) -> T | None:
    position = bisect_left(keys, word)
    if position < len(keys) and keys[position] == word:
        return table[position][1]
    return None


def classify_command(word: str) -> QueryKind:
    """Map a command word to its QueryKind, or QueryKind.INVALID."""
    kind = _lookup(word, _COMMAND_KEYS, COMMAND_NAMES)
    return QueryKind.INVALID if kind is None else kind


def classify_type(word: str) -> FieldType | None:
    """Map a type name to its FieldType, or None when unknown."""
    return _lookup(word, _TYPE_KEYS, TYPE_NAMES)


def type_name(field_type: FieldType) -> str:
    """Return the query-language name of a field type."""
    for name, candidate in TYPE_NAMES:
        if candidate is field_type:
            return name
    raise ValueError(f"Unknown field type: {field_type!r}")
