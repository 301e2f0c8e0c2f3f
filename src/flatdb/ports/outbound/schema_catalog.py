"""Schema Catalog port.

This outbound port defines the contract for the persisted catalog of
table schemas. The catalog is append-only: schemas are added by DATASET
and never updated or removed.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Iterator, Protocol

from flatdb.domain.entities import TableSchema


class SchemaCatalog(Protocol):
    """Protocol for the append-only schema catalog.

    Lookups are linear scans from the start of the catalog; the first
    schema with a matching name wins. The catalog itself does not reject
    duplicates: callers must call ``find_schema`` before ``append_schema``.
    """

    @abstractmethod
    def append_schema(self, schema: TableSchema) -> None:
        """Append one schema record to the end of the catalog.

        Args:
            schema: The schema to persist.

        Raises:
            SchemaError: If the schema does not fit the record layout.
            StorageError: If the catalog cannot be written.
        """
        ...

    @abstractmethod
    def find_schema(self, name: str) -> TableSchema | None:
        """Find a schema by exact table name.

        Args:
            name: The table name.

        Returns:
            The first matching schema, or None if not found.

        Raises:
            FormatError: If a catalog record is corrupt.
            StorageError: If the catalog cannot be read.
        """
        ...

    @abstractmethod
    def iter_schemas(self) -> Iterator[TableSchema]:
        """Iterate over every schema in catalog order."""
        ...
