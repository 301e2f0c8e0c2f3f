"""Predicate evaluation over stored rows.

A predicate tail is the sequence of clauses after the command clause.
Filtering is conjunctive: a row matches when every comparison clause that
names a known column holds. Assignment clauses are not predicates and are
skipped, as are clauses naming unknown columns; callers that must reject
unknown columns run ``validate_clauses`` first.

Comparisons read ``stored <op> literal``. The literal is converted to the
column type before comparing: numerically for INTEGER and NUMBER,
lexicographically for STRING. For BOOLEAN every comparison operator is
treated as equality against ``literal == "True"``.
"""

from __future__ import annotations

from typing import Callable, Iterable

from flatdb.domain.entities import Clause, Column, Row, TableSchema, TypedValue
from flatdb.domain.errors import SchemaError
from flatdb.domain.services.row_codec import parse_value
from flatdb.domain.value_objects import FieldType, Operator

_COMPARATORS: dict[Operator, Callable[[object, object], bool]] = {
    Operator.EQUAL: lambda lhs, rhs: lhs == rhs,
    Operator.NOT_EQUAL: lambda lhs, rhs: lhs != rhs,
    Operator.GREATER_THAN: lambda lhs, rhs: lhs > rhs,
    Operator.GREATER_OR_EQUAL: lambda lhs, rhs: lhs >= rhs,
    Operator.LESS_THAN: lambda lhs, rhs: lhs < rhs,
    Operator.LESS_OR_EQUAL: lambda lhs, rhs: lhs <= rhs,
}


def literal_value(clause: Clause, column: Column) -> TypedValue:
    """Convert a clause's literal to the type of the column it names.

    Raises:
        SchemaError: If the literal is not valid for the column type.
    """
    try:
        return parse_value(clause.value, column.type)
    except ValueError as e:
        raise SchemaError(f"invalid value for column `{column.name}`: {e}") from e


def compare(stored: TypedValue, clause: Clause, column: Column) -> bool:
    """Evaluate ``stored <clause.operator> clause.value``.

    Raises:
        ValueError: If the clause operator is not a comparison.
        SchemaError: If the literal does not fit the column type.
    """
    comparator = _COMPARATORS.get(clause.operator)
    if comparator is None:
        raise ValueError(f"{clause.operator.name} is not a comparison operator")

    if column.type is FieldType.BOOLEAN:
        return stored.value == (clause.value == "True")

    literal = literal_value(clause, column)
    return comparator(stored.value, literal.value)


def matches(tail: Iterable[Clause], schema: TableSchema, row: Row) -> bool:
    """Decide whether a row satisfies every predicate clause in the tail.

    An empty tail matches every row.
    """
    for clause in tail:
        if not clause.operator.is_comparison:
            continue
        position = schema.find_column(clause.keyword)
        if position == -1:
            continue
        if not compare(row.values[position], clause, schema.columns[position]):
            return False
    return True


def validate_clauses(tail: Iterable[Clause], schema: TableSchema) -> None:
    """Require every clause in the tail to name an existing column.

    Raises:
        SchemaError: On the first clause naming an unknown column.
    """
    for clause in tail:
        if not schema.has_column(clause.keyword):
            raise SchemaError(f"no column `{clause.keyword}` in table `{schema.name}`")


def validate_assignments(tail: Iterable[Clause], schema: TableSchema) -> None:
    """Require every ASSIGN clause to name a column and fit its type.

    Raises:
        SchemaError: On the first unknown column or invalid literal.
    """
    for clause in tail:
        if clause.operator is not Operator.ASSIGN:
            continue
        position = schema.find_column(clause.keyword)
        if position == -1:
            raise SchemaError(f"no column `{clause.keyword}` in table `{schema.name}`")
        literal_value(clause, schema.columns[position])


def validate_row(schema: TableSchema, row: Row) -> None:
    """Require the row not to carry more fields than the schema has columns.

    Raises:
        SchemaError: If the row is wider than the schema.
    """
    if row.field_count > schema.column_count:
        raise SchemaError(
            f"row {row.index} has {row.field_count} fields, "
            f"table `{schema.name}` only has {schema.column_count} columns"
        )


def apply_assignments(tail: Iterable[Clause], schema: TableSchema, row: Row) -> Row:
    """Overwrite the columns named by every ASSIGN clause in the tail.

    Returns:
        The updated row (the input row is not modified).

    Raises:
        SchemaError: If an assigned literal does not fit its column type.
    """
    for clause in tail:
        if clause.operator is not Operator.ASSIGN:
            continue
        position = schema.find_column(clause.keyword)
        if position == -1:
            continue
        row = row.with_value(position, literal_value(clause, schema.columns[position]))
    return row
