"""Table schemas.

A schema is created once by DATASET, appended to the catalog and never
changed afterwards. Column order is significant: it fixes the order of the
fields in every stored row.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flatdb.domain.errors import SchemaError
from flatdb.domain.value_objects import FieldType, type_name

RESERVED_NAMES = frozenset({".", ".."})


@dataclass(frozen=True, slots=True)
class Column:
    """A named, typed column."""

    name: str
    type: FieldType

    def __str__(self) -> str:
        return f"{self.name}:{type_name(self.type)}"


@dataclass(frozen=True)
class TableSchema:
    """Immutable definition of one table."""

    name: str
    columns: tuple[Column, ...] = field(default_factory=tuple)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def find_column(self, name: str) -> int:
        """Return the position of the named column, or -1 when absent."""
        for position, column in enumerate(self.columns):
            if column.name == name:
                return position
        return -1

    def has_column(self, name: str) -> bool:
        return self.find_column(name) != -1

    def validate(self, max_columns: int, max_name_bytes: int) -> None:
        """Check the schema against the configured bounds.

        Args:
            max_columns: Maximum number of columns.
            max_name_bytes: Maximum UTF-8 length of table and column names.

        Raises:
            SchemaError: If any bound or naming rule is violated.
        """
        _check_name("table", self.name, max_name_bytes)
        if self.name in RESERVED_NAMES or "/" in self.name or "\\" in self.name:
            raise SchemaError(f"invalid table name `{self.name}`")

        if self.column_count > max_columns:
            raise SchemaError(
                f"table `{self.name}` has {self.column_count} columns, "
                f"at most {max_columns} are allowed"
            )

        seen: set[str] = set()
        for column in self.columns:
            _check_name("column", column.name, max_name_bytes)
            if column.name in seen:
                raise SchemaError(f"duplicate column `{column.name}` in table `{self.name}`")
            seen.add(column.name)

    def __str__(self) -> str:
        cols = " ".join(str(column) for column in self.columns)
        return f"{self.name}({cols})"


def _check_name(kind: str, name: str, max_name_bytes: int) -> None:
    if not name:
        raise SchemaError(f"{kind} name must not be empty")
    if "\x00" in name:
        raise SchemaError(f"{kind} name `{name!r}` contains a NUL character")
    try:
        length = len(name.encode("utf-8"))
    except UnicodeEncodeError:
        raise SchemaError(f"{kind} name {name!r} is not valid UTF-8 text") from None
    if length > max_name_bytes:
        raise SchemaError(
            f"{kind} name `{name}` is {length} bytes long, at most {max_name_bytes} are allowed"
        )
