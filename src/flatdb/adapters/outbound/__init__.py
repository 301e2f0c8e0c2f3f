"""Outbound adapters - file-based storage implementations.

Exports:
    - FileSchemaCatalog: Fixed-width binary schema catalog
    - FileRowStore: Text row stores with atomic replace
    - FileRowWriter: Writer for a replacement row store
"""

from flatdb.adapters.outbound.file_row_store import FileRowStore, FileRowWriter
from flatdb.adapters.outbound.file_schema_catalog import FileSchemaCatalog

__all__ = [
    "FileSchemaCatalog",
    "FileRowStore",
    "FileRowWriter",
]
