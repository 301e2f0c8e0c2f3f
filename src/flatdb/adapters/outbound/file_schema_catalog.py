"""File-based Schema Catalog implementation.

This adapter implements the SchemaCatalog protocol with a single binary
file of fixed-size records, one per table, appended in creation order.

Record Format (big-endian, no padding, 16644 bytes):
    - Table name:   128 bytes, UTF-8, NUL padded
    - Column count: 4 bytes (uint32)
    - 128 column slots, each:
        - Column name: 128 bytes, UTF-8, NUL padded
        - Type tag:    1 byte (FieldType value)

Unused column slots are zero filled. The layout has no header and no
version field; it must stay stable for the lifetime of a data directory.
"""

from __future__ import annotations

import struct
from contextlib import closing
from pathlib import Path
from typing import Iterator

from flatdb.domain.entities import Column, TableSchema
from flatdb.domain.errors import FormatError, SchemaError, StorageError
from flatdb.domain.value_objects import FieldType
from flatdb.infrastructure.config import CATALOG_MAX_COLUMNS, CATALOG_NAME_BYTES
from flatdb.infrastructure.logging import get_logger

HEADER_FORMAT = f">{CATALOG_NAME_BYTES}sI"  # table name, column count
COLUMN_FORMAT = f">{CATALOG_NAME_BYTES}sB"  # column name, type tag
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
COLUMN_SIZE = struct.calcsize(COLUMN_FORMAT)
RECORD_SIZE = HEADER_SIZE + CATALOG_MAX_COLUMNS * COLUMN_SIZE

logger = get_logger(__name__)


def _encode_name(name: str) -> bytes:
    try:
        encoded = name.encode("utf-8")
    except UnicodeEncodeError:
        raise SchemaError(f"name {name!r} is not valid UTF-8 text") from None
    # One byte is kept for the NUL terminator.
    if len(encoded) >= CATALOG_NAME_BYTES:
        raise SchemaError(
            f"name `{name}` does not fit a catalog record "
            f"({len(encoded)} bytes, at most {CATALOG_NAME_BYTES - 1})"
        )
    return encoded


def _decode_name(raw: bytes) -> str:
    try:
        return raw.split(b"\x00", 1)[0].decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError(f"catalog record holds an invalid name: {e}") from e


def encode_schema(schema: TableSchema) -> bytes:
    """Serialize a schema to one fixed-size catalog record.

    Raises:
        SchemaError: If the schema exceeds the record capacity.
    """
    if schema.column_count > CATALOG_MAX_COLUMNS:
        raise SchemaError(
            f"table `{schema.name}` has {schema.column_count} columns, "
            f"a catalog record holds at most {CATALOG_MAX_COLUMNS}"
        )

    record = bytearray(RECORD_SIZE)
    struct.pack_into(HEADER_FORMAT, record, 0, _encode_name(schema.name), schema.column_count)
    for slot, column in enumerate(schema.columns):
        struct.pack_into(
            COLUMN_FORMAT,
            record,
            HEADER_SIZE + slot * COLUMN_SIZE,
            _encode_name(column.name),
            int(column.type),
        )
    return bytes(record)


def decode_schema(record: bytes) -> TableSchema:
    """Deserialize one catalog record.

    Raises:
        FormatError: If the record is truncated or inconsistent.
    """
    if len(record) != RECORD_SIZE:
        raise FormatError(f"catalog record requires {RECORD_SIZE} bytes, got {len(record)}")

    raw_name, count = struct.unpack_from(HEADER_FORMAT, record, 0)
    name = _decode_name(raw_name)
    if not name:
        raise FormatError("catalog record has an empty table name")
    if count > CATALOG_MAX_COLUMNS:
        raise FormatError(f"catalog record for `{name}` claims {count} columns")

    columns = []
    for slot in range(count):
        raw_column, tag = struct.unpack_from(COLUMN_FORMAT, record, HEADER_SIZE + slot * COLUMN_SIZE)
        try:
            field_type = FieldType(tag)
        except ValueError:
            raise FormatError(f"catalog record for `{name}` has unknown type tag {tag}") from None
        columns.append(Column(name=_decode_name(raw_column), type=field_type))

    return TableSchema(name=name, columns=tuple(columns))


class FileSchemaCatalog:
    """File-based implementation of the SchemaCatalog protocol.

    The file is opened per call and closed before returning; nothing is
    cached between queries.

    Attributes:
        file_path: Path to the catalog file.
    """

    def __init__(self, file_path: str | Path) -> None:
        """Initialize the catalog.

        Args:
            file_path: Path to the catalog file (created on first append).
        """
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def append_schema(self, schema: TableSchema) -> None:
        """Append one schema record to the end of the catalog."""
        record = encode_schema(schema)
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._file_path, "ab") as file:
                file.write(record)
        except OSError as e:
            raise StorageError(f"cannot write catalog `{self._file_path}`: {e}") from e

        logger.debug("schema_appended", table=schema.name, columns=schema.column_count)

    def find_schema(self, name: str) -> TableSchema | None:
        """Find the first schema with the given table name."""
        with closing(self.iter_schemas()) as schemas:
            for schema in schemas:
                if schema.name == name:
                    return schema
        return None

    def iter_schemas(self) -> Iterator[TableSchema]:
        """Iterate over every schema in catalog order."""
        try:
            file = open(self._file_path, "rb")
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"cannot open catalog `{self._file_path}`: {e}") from e

        with file:
            while True:
                try:
                    record = file.read(RECORD_SIZE)
                except OSError as e:
                    raise StorageError(f"cannot read catalog `{self._file_path}`: {e}") from e
                if not record:
                    return
                if len(record) < RECORD_SIZE:
                    raise FormatError(
                        f"truncated catalog record: got {len(record)} of {RECORD_SIZE} bytes"
                    )
                yield decode_schema(record)
