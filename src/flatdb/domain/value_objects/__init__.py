"""Value objects for the data manager.

Exports:
    Enumerations:
        - ScannerState: Tokenizer scanner states
        - QueryKind: Command kinds
        - Operator: Clause operators
        - FieldType: Column data types

    Classification:
        - classify_command: Command word -> QueryKind
        - classify_type: Type name -> FieldType
        - type_name: FieldType -> type name
"""

from flatdb.domain.value_objects.keywords import (
    COMMAND_NAMES,
    TYPE_NAMES,
    classify_command,
    classify_type,
    type_name,
)
from flatdb.domain.value_objects.query_types import (
    FieldType,
    Operator,
    QueryKind,
    ScannerState,
)

__all__ = [
    # Enumerations
    "ScannerState",
    "QueryKind",
    "Operator",
    "FieldType",
    # Classification
    "COMMAND_NAMES",
    "TYPE_NAMES",
    "classify_command",
    "classify_type",
    "type_name",
]
