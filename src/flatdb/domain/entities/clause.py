"""Clauses: the pseudo-AST produced by the tokenizer.

A query string is reduced to an ordered chain of ``{keyword, operator,
value}`` clauses. The first clause always carries the command word in
``keyword`` and the table name in ``value``; every later clause (the
predicate tail) is a predicate, an assignment or, for DATASET, a
``column:TYPE`` pair.

Example:
    >>> chain = ClauseChain((
    ...     Clause("SELECT", Operator.ASSIGN, "users"),
    ...     Clause("age", Operator.GREATER_OR_EQUAL, "18"),
    ... ))
    >>> chain.command, chain.table_name
    ('SELECT', 'users')
    >>> [c.keyword for c in chain.tail]
    ['age']
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from flatdb.domain.value_objects import Operator


@dataclass(frozen=True, slots=True)
class Clause:
    """One parsed ``{keyword, operator, value}`` unit."""

    keyword: str
    operator: Operator
    value: str

    def __str__(self) -> str:
        return f"{self.keyword}{self.operator.value}{self.value}"


@dataclass(frozen=True)
class ClauseChain:
    """Non-empty, order-preserving sequence of clauses for one query."""

    clauses: tuple[Clause, ...]

    def __post_init__(self) -> None:
        if not self.clauses:
            raise ValueError("ClauseChain requires at least one clause")

    @property
    def head(self) -> Clause:
        """The command clause."""
        return self.clauses[0]

    @property
    def command(self) -> str:
        return self.clauses[0].keyword

    @property
    def table_name(self) -> str:
        return self.clauses[0].value

    @property
    def tail(self) -> tuple[Clause, ...]:
        """Predicate tail: every clause after the command clause."""
        return self.clauses[1:]

    def __iter__(self) -> Iterator[Clause]:
        return iter(self.clauses)

    def __len__(self) -> int:
        return len(self.clauses)

    def __getitem__(self, index: int) -> Clause:
        return self.clauses[index]

    def __str__(self) -> str:
        return " ".join(str(clause) for clause in self.clauses)
