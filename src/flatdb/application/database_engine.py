"""Database Engine - unified entry point for the data manager.

This module provides the DatabaseEngine class that runs one query line
through the pipeline:

    Parse -> Classify -> Dispatch -> {Create | Select | Insert | Update | Delete}

Usage:
    from flatdb.application import DatabaseEngine

    db = DatabaseEngine(config)
    db.execute("DATASET users name:STRING age:INTEGER")
    db.execute("INSERT_INTO users name='Alice' age=30")
    db.execute("SELECT users age>=18")  # rows are written to the output sink

The engine keeps no state between queries: the catalog and row-store files
are opened, processed and closed within each call. SELECT rows and failure
messages go to the output sink; successful non-SELECT queries print
nothing. Unknown command words are ignored.
"""

from __future__ import annotations

import sys
import time
from typing import TextIO

from flatdb.adapters.inbound.tokenizer import QueryTokenizer
from flatdb.adapters.outbound.file_row_store import FileRowStore
from flatdb.adapters.outbound.file_schema_catalog import FileSchemaCatalog
from flatdb.application.executor import ExecutionResult, QueryExecutor
from flatdb.domain.entities import ClauseChain
from flatdb.domain.errors import FlatDBError, ParseError
from flatdb.domain.services import format_row_for_display
from flatdb.domain.value_objects import QueryKind, classify_command
from flatdb.infrastructure.config import Config, get_config
from flatdb.infrastructure.logging import get_logger, query_context
from flatdb.infrastructure.metrics import MetricsRegistry, get_metrics
from flatdb.infrastructure.tracing import mark_span_failed, query_span
from flatdb.ports.outbound import RowStore, SchemaCatalog

logger = get_logger(__name__)


class DatabaseEngine:
    """Executes query lines against a data directory.

    Thread Safety:
        Not thread-safe. Queries must be executed one at a time; there is
        no locking around the catalog or row-store files.
    """

    def __init__(
        self,
        config: Config | None = None,
        catalog: SchemaCatalog | None = None,
        row_store: RowStore | None = None,
        metrics: MetricsRegistry | None = None,
        output: TextIO | None = None,
    ) -> None:
        """Initialize the database engine.

        Args:
            config: Configuration (global configuration if None).
            catalog: Schema catalog (file catalog in the data directory if None).
            row_store: Row store (file row store in the data directory if None).
            metrics: Metrics registry (global registry if None).
            output: Output sink for SELECT rows and failure messages
                (``sys.stdout`` at write time if None).
        """
        self._config = config or get_config()
        self._config.ensure_directories()
        storage = self._config.storage

        self._catalog = catalog or FileSchemaCatalog(storage.catalog_path)
        self._row_store = row_store or FileRowStore(
            data_dir=storage.data_dir,
            encoding=storage.encoding,
            temp_prefix=storage.temp_prefix,
        )
        self._metrics = metrics or get_metrics()
        self._output = output
        self._tokenizer = QueryTokenizer()
        self._executor = QueryExecutor(
            catalog=self._catalog,
            row_store=self._row_store,
            config=self._config,
            metrics=self._metrics,
        )

    @property
    def config(self) -> Config:
        return self._config

    @property
    def catalog(self) -> SchemaCatalog:
        return self._catalog

    @property
    def row_store(self) -> RowStore:
        return self._row_store

    @property
    def output(self) -> TextIO:
        return self._output if self._output is not None else sys.stdout

    def execute(self, query: str) -> ExecutionResult:
        """Execute one query line.

        Args:
            query: The query text.

        Returns:
            ExecutionResult; ``failed`` is set and ``message`` explains the
            failure when the query could not be executed.
        """
        try:
            chain = self._tokenizer.tokenize(query)
        except ParseError as e:
            self._metrics.parse_errors_total.inc()
            return self._fail(QueryKind.INVALID, e)

        kind = classify_command(chain.command)
        if kind is QueryKind.INVALID:
            logger.debug("unknown_command_ignored", command=chain.command)
            return ExecutionResult(query_kind=kind)

        with query_context(kind.value, chain.table_name):
            return self._run(kind, chain)

    def execute_query(self, query: str) -> int:
        """Execute one query line and return its status (0 success, 1 failure)."""
        return self.execute(query).status

    def execute_many(self, queries: list[str]) -> list[ExecutionResult]:
        """Execute several query lines in order."""
        return [self.execute(query) for query in queries]

    def _run(self, kind: QueryKind, chain: ClauseChain) -> ExecutionResult:
        started = time.perf_counter()
        with query_span(kind.value, chain.table_name) as span:
            try:
                result = self._executor.execute(kind, chain)
            except FlatDBError as e:
                mark_span_failed(span, e)
                self._metrics.queries_total.labels(kind.value, "error").inc()
                return self._fail(kind, e)
            span.set_attribute("flatdb.affected_rows", result.affected_rows)

        self._metrics.query_latency_seconds.labels(kind.value).observe(
            time.perf_counter() - started
        )
        self._metrics.queries_total.labels(kind.value, "success").inc()

        if kind is QueryKind.SELECT:
            self._emit_rows(result)

        logger.info("query_executed", affected_rows=result.affected_rows)
        return result

    def _emit_rows(self, result: ExecutionResult) -> None:
        sink = self.output
        for row in result.rows:
            sink.write(format_row_for_display(row) + "\n")

    def _fail(self, kind: QueryKind, error: FlatDBError) -> ExecutionResult:
        # Query text may carry lone surrogates; the sink only gets encodable text.
        message = str(error).encode("utf-8", "backslashreplace").decode("utf-8")
        self.output.write(f"error: {message}\n")
        logger.warning(
            "query_failed",
            query_kind=kind.value,
            error_type=type(error).__name__,
            error=message,
        )
        return ExecutionResult(query_kind=kind, message=message, failed=True)
