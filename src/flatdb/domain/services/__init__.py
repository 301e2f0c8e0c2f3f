"""Domain services for the data manager.

Exports:
    Row Codec:
        - parse_value, format_value: literal text <-> TypedValue
        - encode_row, decode_line: Row <-> row-store line
        - format_row_for_display: SELECT output formatting

    Predicate Evaluator:
        - matches: Conjunctive filter over a predicate tail
        - compare: Single clause comparison
        - validate_clauses, validate_assignments, validate_row: Pre-mutation validation
        - apply_assignments: UPDATE column assignment
"""

from flatdb.domain.services.predicate import (
    apply_assignments,
    compare,
    literal_value,
    matches,
    validate_assignments,
    validate_clauses,
    validate_row,
)
from flatdb.domain.services.row_codec import (
    decode_line,
    encode_row,
    format_row_for_display,
    format_value,
    parse_value,
    split_fields,
)

__all__ = [
    # Row Codec
    "parse_value",
    "format_value",
    "encode_row",
    "decode_line",
    "split_fields",
    "format_row_for_display",
    # Predicate Evaluator
    "matches",
    "compare",
    "literal_value",
    "validate_clauses",
    "validate_assignments",
    "validate_row",
    "apply_assignments",
]
