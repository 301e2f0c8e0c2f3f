"""Outbound ports - contracts for persistent storage.

Exports:
    - SchemaCatalog: Append-only catalog of table schemas
    - RowStore: Per-table row storage with atomic replace
    - RowWriter: Sink for a replacement row store
"""

from flatdb.ports.outbound.row_store import RowStore, RowWriter
from flatdb.ports.outbound.schema_catalog import SchemaCatalog

__all__ = [
    "SchemaCatalog",
    "RowStore",
    "RowWriter",
]
