"""Row Store port.

This outbound port defines the contract for per-table row storage.
Rows are appended by INSERT; UPDATE and DELETE never edit a store in
place, they build a complete replacement and swap it in one step.

Example:
    with row_store.rewrite(schema) as writer:
        for row in row_store.read_rows(schema):
            writer.write(row)
    # The new store is visible only here, after a clean exit.
"""

from __future__ import annotations

from abc import abstractmethod
from contextlib import AbstractContextManager
from typing import Iterator, Protocol

from flatdb.domain.entities import Row, TableSchema


class RowWriter(Protocol):
    """Sink for rows of a replacement store under construction."""

    @property
    @abstractmethod
    def rows_written(self) -> int:
        """Number of rows written so far."""
        ...

    @abstractmethod
    def write(self, row: Row) -> None:
        """Append one row to the replacement store.

        Raises:
            FormatError: If the row cannot be encoded.
            StorageError: If the write fails.
        """
        ...


class RowStore(Protocol):
    """Protocol for table row storage."""

    @abstractmethod
    def read_rows(self, schema: TableSchema) -> Iterator[Row]:
        """Stream the table's rows in store order.

        A table with no store yet yields nothing. The underlying file is
        closed when the iterator is exhausted or closed.

        Raises:
            FormatError: If a stored line cannot be decoded.
            StorageError: If the store cannot be read.
        """
        ...

    @abstractmethod
    def append_row(self, schema: TableSchema, row: Row) -> None:
        """Append one row to the end of the table's store.

        Raises:
            FormatError: If the row cannot be encoded.
            StorageError: If the store cannot be written.
        """
        ...

    @abstractmethod
    def row_count(self, schema: TableSchema) -> int:
        """Return the number of rows currently stored."""
        ...

    @abstractmethod
    def rewrite(self, schema: TableSchema) -> AbstractContextManager[RowWriter]:
        """Build a replacement store and swap it in atomically.

        On a clean exit from the context the replacement becomes the
        table's store in a single step. If the block raises, the
        replacement is discarded and the current store is left untouched.

        Raises:
            StorageError: If the replacement cannot be created or swapped in.
        """
        ...
