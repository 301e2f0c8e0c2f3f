"""Exception hierarchy for the data manager.

Every failure a query can report derives from FlatDBError; the database
engine turns these into a failed ExecutionResult with a readable message.
"""

from __future__ import annotations


class FlatDBError(Exception):
    """Base class for all reportable query failures."""

    pass


class ParseError(FlatDBError):
    """Malformed query string (bad token stream, quote or operator placement)."""

    pass


class SchemaError(FlatDBError):
    """Query conflicts with a table schema (duplicate table, unknown column, bounds)."""

    pass


class TableNotFoundError(SchemaError):
    """The query names a table that is not in the catalog."""

    def __init__(self, table_name: str) -> None:
        super().__init__(f"no table `{table_name}`")
        self.table_name = table_name


class FormatError(FlatDBError):
    """A stored row line or catalog record cannot be decoded."""

    pass


class StorageError(FlatDBError):
    """Opening, reading, writing or replacing a storage file failed."""

    pass
