"""Ports layer - interface definitions following Hexagonal Architecture.

Outbound ports describe the storage the query engine depends on; adapters
implement them with concrete file formats.
"""

from flatdb.ports.outbound import RowStore, RowWriter, SchemaCatalog

__all__ = [
    "SchemaCatalog",
    "RowStore",
    "RowWriter",
]
