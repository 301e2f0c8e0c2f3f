"""Enumerations shared by the tokenizer, the catalog and the query engine."""

from __future__ import annotations

from enum import Enum, IntEnum


class ScannerState(Enum):
    """States of the two-state query scanner."""

    SCANNING_TOKEN = "scanning_token"  # accumulating a keyword, operator expected next
    SCANNING_VALUE = "scanning_value"  # accumulating a value, delimiter expected next


class QueryKind(Enum):
    """Commands understood by the query engine."""

    CREATE = "create"
    SELECT = "select"
    DELETE = "delete"
    INSERT = "insert"
    UPDATE = "update"
    INVALID = "invalid"


class Operator(Enum):
    """Operators that bind a clause keyword to its value."""

    EQUAL = "="
    NOT_EQUAL = "<>"
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_OR_EQUAL = ">="
    LESS_OR_EQUAL = "<="
    ASSIGN = ":"
    INVALID = "!"

    @property
    def is_comparison(self) -> bool:
        """True for the six operators a predicate can use."""
        return self not in (Operator.ASSIGN, Operator.INVALID)


class FieldType(IntEnum):
    """Column data types.

    The integer values are the type tags persisted in catalog records and
    must not be renumbered.
    """

    INTEGER = 0
    NUMBER = 1
    STRING = 2
    BOOLEAN = 3
