"""Domain entities for the data manager.

Exports:
    Clause:
        - Clause: One ``{keyword, operator, value}`` unit
        - ClauseChain: Ordered clauses of one query

    Schema:
        - Column: Named, typed column
        - TableSchema: Immutable table definition

    Row:
        - TypedValue: Value tagged with its FieldType
        - Row: Row index plus typed values
"""

from flatdb.domain.entities.clause import Clause, ClauseChain
from flatdb.domain.entities.row import Row, TypedValue
from flatdb.domain.entities.schema import Column, TableSchema

__all__ = [
    # Clause
    "Clause",
    "ClauseChain",
    # Schema
    "Column",
    "TableSchema",
    # Row
    "TypedValue",
    "Row",
]
