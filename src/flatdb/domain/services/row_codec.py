"""Row codec: typed rows <-> row-store text lines.

Line format (one row per line)::

    <index>;<value 1>;<value 2>;...;<value n>\\n

Values are formatted by column type:
    - INTEGER: decimal
    - NUMBER:  shortest round-trip float representation (``repr``)
    - BOOLEAN: the words ``True`` / ``False``
    - STRING:  wrapped in single quotes

Field splitting ignores ``;`` inside single quotes, so string values may
contain the separator. A trailing ``;`` left by older stores is accepted.
"""

from __future__ import annotations

from flatdb.domain.entities import Row, TableSchema, TypedValue
from flatdb.domain.errors import FormatError
from flatdb.domain.value_objects import FieldType

FIELD_SEPARATOR = ";"
QUOTE = "'"
DISPLAY_WIDTH = 10


def parse_value(text: str, field_type: FieldType) -> TypedValue:
    """Convert literal text to a value of the given type.

    Booleans are true only for the exact word ``True``. A single leading
    and trailing quote is stripped from strings.

    Raises:
        ValueError: If the text is not a valid INTEGER or NUMBER literal.
    """
    if field_type is FieldType.INTEGER:
        try:
            return TypedValue.integer(int(text, 10))
        except ValueError:
            raise ValueError(f"`{text}` is not a valid INTEGER") from None
    if field_type is FieldType.NUMBER:
        try:
            return TypedValue.number(float(text))
        except ValueError:
            raise ValueError(f"`{text}` is not a valid NUMBER") from None
    if field_type is FieldType.BOOLEAN:
        return TypedValue.boolean(text == "True")

    if text.startswith(QUOTE):
        text = text[1:]
    if text.endswith(QUOTE):
        text = text[:-1]
    return TypedValue.string(text)


def format_value(value: TypedValue) -> str:
    """Format one value for the row store."""
    if value.type is FieldType.INTEGER:
        return str(value.value)
    if value.type is FieldType.NUMBER:
        return repr(value.value)
    if value.type is FieldType.BOOLEAN:
        return "True" if value.value else "False"

    text = str(value.value)
    if QUOTE in text or "\n" in text or "\r" in text:
        raise FormatError(f"string value {text!r} cannot be stored (quote or line break)")
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        raise FormatError(f"string value {text!r} is not valid UTF-8 text") from None
    return f"{QUOTE}{text}{QUOTE}"


def encode_row(row: Row, schema: TableSchema) -> str:
    """Encode a row as one newline-terminated line.

    Raises:
        FormatError: If the row does not fit the schema or a string
            cannot be represented.
    """
    if row.field_count != schema.column_count:
        raise FormatError(
            f"row has {row.field_count} fields, table `{schema.name}` "
            f"has {schema.column_count} columns"
        )

    fields = [str(row.index)]
    for value, column in zip(row.values, schema.columns):
        if value.type is not column.type:
            raise FormatError(
                f"column `{column.name}` is {column.type.name}, got {value.type.name}"
            )
        fields.append(format_value(value))
    return FIELD_SEPARATOR.join(fields) + "\n"


def split_fields(line: str) -> list[str]:
    """Split a line on ``;`` outside single-quoted sections."""
    fields: list[str] = []
    current: list[str] = []
    quoted = False
    for char in line:
        if char == QUOTE:
            quoted = not quoted
            current.append(char)
        elif char == FIELD_SEPARATOR and not quoted:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


def decode_line(line: str, schema: TableSchema) -> Row:
    """Decode one row-store line using the schema's column types.

    Raises:
        FormatError: If the line has the wrong number of fields or a
            field cannot be parsed as its column type.
    """
    text = line.rstrip("\r\n")
    fields = split_fields(text)

    expected = schema.column_count + 1
    if len(fields) == expected + 1 and fields[-1] == "":
        fields.pop()
    if len(fields) != expected:
        raise FormatError(
            f"malformed row in `{schema.name}`: expected {expected} fields, "
            f"got {len(fields)}: {text!r}"
        )

    try:
        index = int(fields[0], 10)
    except ValueError:
        raise FormatError(f"malformed row index {fields[0]!r} in `{schema.name}`") from None

    values = []
    for raw, column in zip(fields[1:], schema.columns):
        try:
            values.append(parse_value(raw, column.type))
        except ValueError as e:
            raise FormatError(f"malformed value for `{column.name}` in `{schema.name}`: {e}") from e

    return Row(index=index, values=tuple(values))


def format_row_for_display(row: Row) -> str:
    """Render a row as one fixed-width text line (without newline)."""
    cells = []
    for value in row.values:
        if value.type is FieldType.INTEGER:
            cell = f"{value.value:>{DISPLAY_WIDTH}d}"
        elif value.type is FieldType.NUMBER:
            cell = f"{value.value:>{DISPLAY_WIDTH}g}"
        elif value.type is FieldType.BOOLEAN:
            cell = f"{'True' if value.value else 'False':<{DISPLAY_WIDTH}}"
        else:
            cell = f"{value.value:<{DISPLAY_WIDTH}}"
        cells.append(f"{cell}|\t")
    return "".join(cells)
