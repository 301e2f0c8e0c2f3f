"""File-based Row Store implementation.

This adapter implements the RowStore protocol with one text file per
table, named after the table, inside the data directory. Each line holds
one row encoded by the row codec.

Atomic replace:
    UPDATE and DELETE write every surviving row to a uniquely named
    temporary file in the same directory, then swap it over the table's
    file with ``os.replace``. If anything fails before the swap, the
    temporary file is removed and the table's file is left untouched.
    A crash between completing the temporary file and the swap leaves a
    stray temporary file behind; the visible table is still intact.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

from flatdb.domain.entities import Row, TableSchema
from flatdb.domain.errors import FormatError, StorageError
from flatdb.domain.services.row_codec import decode_line, encode_row
from flatdb.infrastructure.logging import get_logger

logger = get_logger(__name__)


class FileRowWriter:
    """Writes encoded rows to an open replacement file."""

    def __init__(self, file: TextIO, schema: TableSchema) -> None:
        self._file = file
        self._schema = schema
        self._rows_written = 0

    @property
    def rows_written(self) -> int:
        return self._rows_written

    def write(self, row: Row) -> None:
        line = encode_row(row, self._schema)
        try:
            self._file.write(line)
        except UnicodeEncodeError as e:
            raise FormatError(f"row cannot be stored in `{self._schema.name}`: {e}") from e
        except OSError as e:
            raise StorageError(f"cannot write replacement for `{self._schema.name}`: {e}") from e
        self._rows_written += 1


class FileRowStore:
    """File-based implementation of the RowStore protocol.

    Attributes:
        data_dir: Directory holding one row-store file per table.
    """

    def __init__(
        self,
        data_dir: str | Path,
        encoding: str = "utf-8",
        temp_prefix: str = "__database_Temporary_",
    ) -> None:
        """Initialize the row store.

        Args:
            data_dir: Directory for row-store files (created on first write).
            encoding: Text encoding of the files.
            temp_prefix: File name prefix for replacement files.
        """
        self._data_dir = Path(data_dir)
        self._encoding = encoding
        self._temp_prefix = temp_prefix

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, schema: TableSchema) -> Path:
        """Path of the table's row-store file."""
        return self._data_dir / schema.name

    def read_rows(self, schema: TableSchema) -> Iterator[Row]:
        """Stream the table's rows in store order."""
        path = self.path_for(schema)
        try:
            file = open(path, "r", encoding=self._encoding)
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"cannot open row store `{path}`: {e}") from e

        with file:
            try:
                for line in file:
                    yield decode_line(line, schema)
            except UnicodeDecodeError as e:
                raise FormatError(f"row store `{path}` is not valid {self._encoding}: {e}") from e
            except OSError as e:
                raise StorageError(f"cannot read row store `{path}`: {e}") from e

    def append_row(self, schema: TableSchema, row: Row) -> None:
        """Append one encoded row to the table's file."""
        line = encode_row(row, schema)
        path = self.path_for(schema)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding=self._encoding) as file:
                file.write(line)
        except UnicodeEncodeError as e:
            raise FormatError(f"row cannot be stored as {self._encoding}: {e}") from e
        except OSError as e:
            raise StorageError(f"cannot append to row store `{path}`: {e}") from e

    def row_count(self, schema: TableSchema) -> int:
        """Count the lines of the table's file."""
        path = self.path_for(schema)
        try:
            with open(path, "r", encoding=self._encoding) as file:
                return sum(1 for _ in file)
        except FileNotFoundError:
            return 0
        except UnicodeDecodeError as e:
            raise FormatError(f"row store `{path}` is not valid {self._encoding}: {e}") from e
        except OSError as e:
            raise StorageError(f"cannot read row store `{path}`: {e}") from e

    @contextmanager
    def rewrite(self, schema: TableSchema) -> Iterator[FileRowWriter]:
        """Build a replacement file and swap it over the table's file."""
        target = self.path_for(schema)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(prefix=self._temp_prefix, dir=self._data_dir)
        except OSError as e:
            raise StorageError(f"cannot create temporary store for `{schema.name}`: {e}") from e

        temp_path = Path(temp_name)
        committed = False
        try:
            with os.fdopen(fd, "w", encoding=self._encoding) as file:
                writer = FileRowWriter(file, schema)
                yield writer
                file.flush()
                os.fsync(file.fileno())
            if target.exists():
                shutil.copymode(target, temp_path)
            os.replace(temp_path, target)
            committed = True
            logger.debug("row_store_replaced", table=schema.name, rows=writer.rows_written)
        except OSError as e:
            raise StorageError(f"cannot replace row store `{target}`: {e}") from e
        finally:
            if not committed:
                self._discard(temp_path, schema)

    def _discard(self, temp_path: Path, schema: TableSchema) -> None:
        """Remove an abandoned replacement file."""
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(
                "temporary_store_not_removed",
                table=schema.name,
                path=str(temp_path),
                error=str(e),
            )
            return
        logger.debug("temporary_store_discarded", table=schema.name)
