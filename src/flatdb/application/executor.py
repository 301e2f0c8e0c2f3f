"""Query Executor: one handler per command.

Each handler receives a tokenized, classified query and composes the
schema catalog, the row store, the row codec and the predicate evaluator:

    CREATE  reject name collisions, build the schema, append it
    SELECT  stream rows, keep the ones matching the predicate tail
    INSERT  validate the assignments, append one row
    UPDATE  stream rows into a replacement store, rewriting matches
    DELETE  stream rows into a replacement store, omitting matches

Handlers raise FlatDBError subclasses on failure; the database engine
turns them into failed results. UPDATE and DELETE are all-or-nothing with
respect to the visible table: any failure discards the replacement store.
"""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass, field
from typing import Callable

from flatdb.domain.entities import Clause, ClauseChain, Column, Row, TableSchema
from flatdb.domain.errors import FlatDBError, ParseError, SchemaError, TableNotFoundError
from flatdb.domain.services import (
    apply_assignments,
    literal_value,
    matches,
    validate_assignments,
    validate_clauses,
    validate_row,
)
from flatdb.domain.value_objects import Operator, QueryKind, classify_type
from flatdb.infrastructure.config import Config
from flatdb.infrastructure.logging import get_logger
from flatdb.infrastructure.metrics import MetricsRegistry
from flatdb.ports.outbound import RowStore, SchemaCatalog

logger = get_logger(__name__)

BINDING_OPERATORS = frozenset({Operator.ASSIGN, Operator.EQUAL})


@dataclass
class ExecutionResult:
    """Result of query execution."""

    query_kind: QueryKind = QueryKind.INVALID
    rows: list[Row] = field(default_factory=list)
    affected_rows: int = 0
    message: str = ""
    failed: bool = False

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def status(self) -> int:
        """Process-style status: 0 on success, 1 on failure."""
        return 1 if self.failed else 0


class QueryExecutor:
    """Executes classified queries against the catalog and row stores."""

    def __init__(
        self,
        catalog: SchemaCatalog,
        row_store: RowStore,
        config: Config,
        metrics: MetricsRegistry,
    ) -> None:
        self._catalog = catalog
        self._row_store = row_store
        self._limits = config.limits
        self._reserved_names = frozenset({config.storage.catalog_file})
        self._reserved_prefix = config.storage.temp_prefix
        self._metrics = metrics

    def execute(self, kind: QueryKind, chain: ClauseChain) -> ExecutionResult:
        """Dispatch a query to its handler.

        Args:
            kind: The classified command.
            chain: The tokenized query.

        Returns:
            ExecutionResult with rows and/or status message.

        Raises:
            FlatDBError: If the query fails.
            ValueError: If ``kind`` has no handler.
        """
        handlers: dict[QueryKind, Callable[[ClauseChain], ExecutionResult]] = {
            QueryKind.CREATE: self._execute_create,
            QueryKind.SELECT: self._execute_select,
            QueryKind.INSERT: self._execute_insert,
            QueryKind.UPDATE: self._execute_update,
            QueryKind.DELETE: self._execute_delete,
        }
        handler = handlers.get(kind)
        if handler is None:
            raise ValueError(f"No handler for query kind: {kind}")
        return handler(chain)

    def _require_schema(self, chain: ClauseChain) -> TableSchema:
        schema = self._catalog.find_schema(chain.table_name)
        if schema is None:
            raise TableNotFoundError(chain.table_name)
        return schema

    def _execute_create(self, chain: ClauseChain) -> ExecutionResult:
        """Execute a DATASET statement."""
        name = chain.table_name
        if self._catalog.find_schema(name) is not None:
            raise SchemaError(f"there is a table with the same name, cannot create table `{name}`")
        if name in self._reserved_names or name.startswith(self._reserved_prefix):
            raise SchemaError(f"`{name}` is reserved and cannot be used as a table name")

        columns = []
        for clause in chain.tail:
            _require_binding(clause)
            field_type = classify_type(clause.value)
            if field_type is None:
                raise SchemaError(f"unknown type `{clause.value}` for column `{clause.keyword}`")
            columns.append(Column(name=clause.keyword, type=field_type))

        schema = TableSchema(name=name, columns=tuple(columns))
        schema.validate(self._limits.max_columns, self._limits.max_name_bytes)
        self._catalog.append_schema(schema)

        logger.info("table_created", table=name, columns=schema.column_count)
        return ExecutionResult(
            query_kind=QueryKind.CREATE, message=f"OK: table `{name}` created"
        )

    def _execute_select(self, chain: ClauseChain) -> ExecutionResult:
        """Execute a SELECT statement."""
        schema = self._require_schema(chain)
        tail = chain.tail

        rows = []
        with closing(self._row_store.read_rows(schema)) as stored:
            for row in stored:
                self._metrics.rows_scanned_total.inc()
                if matches(tail, schema, row):
                    rows.append(row)

        return ExecutionResult(
            query_kind=QueryKind.SELECT,
            rows=rows,
            affected_rows=len(rows),
            message=f"OK: {len(rows)} row(s) selected",
        )

    def _execute_insert(self, chain: ClauseChain) -> ExecutionResult:
        """Execute an INSERT_INTO statement.

        Values are typed by position: the n-th clause fills the n-th
        column. Clause keywords must still name existing columns.
        """
        schema = self._require_schema(chain)
        tail = chain.tail

        for count, clause in enumerate(tail, start=1):
            _require_binding(clause)
            validate_clauses((clause,), schema)
            if count > schema.column_count:
                raise SchemaError(
                    f"you specified more columns than available in table `{schema.name}`"
                )
        if len(tail) != schema.column_count:
            raise SchemaError(
                f"table `{schema.name}` has {schema.column_count} columns, "
                f"got {len(tail)} value(s)"
            )

        values = tuple(
            literal_value(clause, column) for clause, column in zip(tail, schema.columns)
        )
        row = Row(index=self._row_store.row_count(schema), values=values)
        self._row_store.append_row(schema, row)
        self._metrics.rows_written_total.labels("insert").inc()

        return ExecutionResult(
            query_kind=QueryKind.INSERT, affected_rows=1, message="OK: 1 row(s) inserted"
        )

    def _execute_update(self, chain: ClauseChain) -> ExecutionResult:
        """Execute an UPDATE statement."""
        schema = self._require_schema(chain)
        tail = chain.tail
        # Assigned literals are checked even when no row matches.
        validate_assignments(tail, schema)

        def assign(row: Row) -> Row | None:
            return apply_assignments(tail, schema, row)

        updated = self._rewrite_table(schema, tail, assign, "update")
        return ExecutionResult(
            query_kind=QueryKind.UPDATE,
            affected_rows=updated,
            message=f"OK: {updated} row(s) updated",
        )

    def _execute_delete(self, chain: ClauseChain) -> ExecutionResult:
        """Execute a DELETE statement."""
        schema = self._require_schema(chain)
        deleted = self._rewrite_table(schema, chain.tail, lambda row: None, "delete")
        return ExecutionResult(
            query_kind=QueryKind.DELETE,
            affected_rows=deleted,
            message=f"OK: {deleted} row(s) deleted",
        )

    def _rewrite_table(
        self,
        schema: TableSchema,
        tail: tuple[Clause, ...],
        on_match: Callable[[Row], Row | None],
        operation: str,
    ) -> int:
        """Stream every row into a replacement store.

        Rows matching the predicate tail pass through ``on_match``, which
        returns the row to keep (possibly modified) or None to drop it;
        other rows are copied unchanged. The replacement becomes visible
        only if every row was processed without error.

        Returns:
            Number of matching rows.
        """
        validate_clauses(tail, schema)

        affected = 0
        try:
            with self._row_store.rewrite(schema) as writer:
                with closing(self._row_store.read_rows(schema)) as stored:
                    for row in stored:
                        self._metrics.rows_scanned_total.inc()
                        validate_row(schema, row)
                        if matches(tail, schema, row):
                            affected += 1
                            row = on_match(row)
                            if row is None:
                                continue
                        writer.write(row)
        except FlatDBError:
            self._metrics.store_replacements_total.labels("discarded").inc()
            raise

        self._metrics.store_replacements_total.labels("committed").inc()
        self._metrics.rows_written_total.labels(operation).inc(affected)
        logger.info("rows_rewritten", table=schema.name, operation=operation, affected=affected)
        return affected


def _require_binding(clause: Clause) -> None:
    if clause.operator not in BINDING_OPERATORS:
        raise ParseError(f"invalid operator for expression `{clause}`")
