"""Query tokenizer.

This module turns one query line into a ClauseChain using a two-state
scanner:

    SCANNING_TOKEN  accumulate a keyword until an operator (or a bare
                    word boundary) is found
    SCANNING_VALUE  accumulate a value until unquoted whitespace or the
                    end of the input

Operators:
    =  Equal          <>  NotEqual (also !=)
    >  GreaterThan    >=  GreaterOrEqual
    <  LessThan       <=  LessOrEqual
    :  Assign

A word followed by whitespace and no operator is bound with Assign, which
is how the command clause (``SELECT users``) is formed. Single quotes
enclose a literal that may contain whitespace, separators and operator
characters; the quotes themselves are dropped.

Supported query shapes:
    - DATASET <table> <col>:<TYPE> ...
    - SELECT <table> [<col><op><value> ...]
    - INSERT_INTO <table> <col>=<value> ...
    - UPDATE <table> <col><op><value> ... <col>:<value> ...
    - DELETE <table> <col><op><value> ...
"""

from __future__ import annotations

from flatdb.domain.entities import Clause, ClauseChain
from flatdb.domain.errors import ParseError
from flatdb.domain.value_objects import Operator, ScannerState

OPERATOR_CHARS = frozenset(":<>!=")
QUOTE = "'"


class QueryTokenizer:
    """Tokenizer for the five query shapes.

    Output order is exactly the left-to-right order of the input; keyword
    case is preserved.

    Example:
        >>> chain = QueryTokenizer().tokenize("SELECT users name='Bob' age>=18")
        >>> [str(clause) for clause in chain]
        ['SELECT:users', 'name=Bob', 'age>=18']
    """

    def tokenize(self, query: str) -> ClauseChain:
        """Tokenize a query string.

        Args:
            query: One line of query text.

        Returns:
            The clauses of the query, in input order.

        Raises:
            ParseError: If the query is empty, has an unterminated quote,
                misplaced operator or quote, or a keyword without a value.
        """
        clauses: list[Clause] = []
        state = ScannerState.SCANNING_TOKEN
        buffer: list[str] = []
        keyword = ""
        operator = Operator.ASSIGN
        length = len(query)
        position = 0

        while position < length:
            char = query[position]

            if char in OPERATOR_CHARS:
                if state is ScannerState.SCANNING_VALUE:
                    raise ParseError(
                        f"cannot parse query: unexpected operator `{char}` at position {position}"
                    )
                operator, position = self._read_operator(query, position)
                keyword = "".join(buffer).strip()
                if not keyword:
                    raise ParseError(
                        f"cannot parse query: operator `{operator.value}` has no keyword"
                    )
                buffer = []
                state = ScannerState.SCANNING_VALUE
                position = self._skip_whitespace(query, position + 1)
                continue

            if char == QUOTE:
                if state is ScannerState.SCANNING_TOKEN:
                    raise ParseError(
                        f"cannot parse query: unexpected quote at position {position}"
                    )
                end = query.find(QUOTE, position + 1)
                if end == -1:
                    raise ParseError(
                        f"cannot parse query: unterminated quote at position {position}"
                    )
                buffer.append(query[position + 1:end])
                position = end + 1
                continue

            if char.isspace():
                if state is ScannerState.SCANNING_VALUE:
                    clauses.append(Clause(keyword, operator, "".join(buffer)))
                    buffer = []
                    keyword = ""
                    state = ScannerState.SCANNING_TOKEN
                    position += 1
                    continue
                if not buffer:
                    position += 1
                    continue
                # A bare word is bound with Assign unless an operator follows.
                following = self._skip_whitespace(query, position)
                if following < length and query[following] not in OPERATOR_CHARS:
                    keyword = "".join(buffer)
                    operator = Operator.ASSIGN
                    buffer = []
                    state = ScannerState.SCANNING_VALUE
                position = following
                continue

            buffer.append(char)
            position += 1

        if state is ScannerState.SCANNING_VALUE:
            clauses.append(Clause(keyword, operator, "".join(buffer)))
        elif buffer:
            raise ParseError(f"cannot parse query: `{''.join(buffer)}` has no value")

        if not clauses:
            raise ParseError("cannot parse query: empty query")

        return ClauseChain(tuple(clauses))

    def _read_operator(self, query: str, position: int) -> tuple[Operator, int]:
        """Resolve the operator starting at ``position``.

        Returns:
            The operator and the position of its last character.

        Raises:
            ParseError: For a ``!`` not followed by ``=``.
        """
        char = query[position]
        lookahead = query[position + 1] if position + 1 < len(query) else ""

        if char == ">":
            if lookahead == "=":
                return Operator.GREATER_OR_EQUAL, position + 1
            return Operator.GREATER_THAN, position
        if char == "<":
            if lookahead == "=":
                return Operator.LESS_OR_EQUAL, position + 1
            if lookahead == ">":
                return Operator.NOT_EQUAL, position + 1
            return Operator.LESS_THAN, position
        if char == "!":
            if lookahead == "=":
                return Operator.NOT_EQUAL, position + 1
            raise ParseError(f"cannot parse query: invalid operator `!` at position {position}")
        if char == "=":
            return Operator.EQUAL, position
        return Operator.ASSIGN, position

    @staticmethod
    def _skip_whitespace(query: str, position: int) -> int:
        while position < len(query) and query[position].isspace():
            position += 1
        return position


_default_tokenizer = QueryTokenizer()


def tokenize(query: str) -> ClauseChain:
    """Tokenize a query string with the default tokenizer."""
    return _default_tokenizer.tokenize(query)
