"""Unit tests for QueryExecutor."""

from __future__ import annotations

from pathlib import Path

import pytest

from flatdb.adapters.inbound import tokenize
from flatdb.adapters.outbound import FileRowStore, FileSchemaCatalog
from flatdb.application.executor import ExecutionResult, QueryExecutor
from flatdb.domain.errors import ParseError, SchemaError, TableNotFoundError
from flatdb.domain.value_objects import FieldType, QueryKind, classify_command
from flatdb.infrastructure.config import Config
from flatdb.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def executor(test_config: Config, metrics_registry: MetricsRegistry) -> QueryExecutor:
    """Create an executor over file adapters in a temp directory."""
    storage = test_config.storage
    return QueryExecutor(
        catalog=FileSchemaCatalog(storage.catalog_path),
        row_store=FileRowStore(storage.data_dir, temp_prefix=storage.temp_prefix),
        config=test_config,
        metrics=metrics_registry,
    )


def run(executor: QueryExecutor, query: str) -> ExecutionResult:
    chain = tokenize(query)
    return executor.execute(classify_command(chain.command), chain)


@pytest.fixture
def people(executor: QueryExecutor) -> QueryExecutor:
    """Executor with a populated `people` table."""
    run(executor, "DATASET people name:STRING age:INTEGER active:BOOLEAN")
    run(executor, "INSERT_INTO people name='Ann' age=30 active=True")
    run(executor, "INSERT_INTO people name='Bob' age=17 active=False")
    run(executor, "INSERT_INTO people name='Cid' age=45 active=True")
    return executor


@pytest.mark.unit
class TestCreate:
    """Tests for DATASET."""

    def test_create(self, executor: QueryExecutor, test_config: Config) -> None:
        result = run(executor, "DATASET users name:STRING score:NUMBER")

        assert result.query_kind is QueryKind.CREATE
        assert result.success
        schema = FileSchemaCatalog(test_config.storage.catalog_path).find_schema("users")
        assert [c.type for c in schema.columns] == [FieldType.STRING, FieldType.NUMBER]

    def test_duplicate_table(self, executor: QueryExecutor) -> None:
        run(executor, "DATASET users name:STRING")

        with pytest.raises(SchemaError, match="same name"):
            run(executor, "DATASET users id:INTEGER")

    def test_unknown_type(self, executor: QueryExecutor) -> None:
        with pytest.raises(SchemaError, match="unknown type `TEXT`"):
            run(executor, "DATASET users name:TEXT")

    def test_comparison_operator_rejected(self, executor: QueryExecutor) -> None:
        with pytest.raises(ParseError, match="invalid operator"):
            run(executor, "DATASET users age>INTEGER")

    @pytest.mark.parametrize("name", ["__tables_data.dat", "__database_Temporary_x"])
    def test_reserved_names(self, executor: QueryExecutor, name: str) -> None:
        with pytest.raises(SchemaError, match="reserved"):
            run(executor, f"DATASET {name} id:INTEGER")

    def test_nothing_appended_on_failure(self, executor: QueryExecutor, test_config: Config) -> None:
        with pytest.raises(SchemaError):
            run(executor, "DATASET users a:INTEGER a:STRING")

        assert not test_config.storage.catalog_path.exists()


@pytest.mark.unit
class TestSelect:
    """Tests for SELECT."""

    def test_select_all(self, people: QueryExecutor) -> None:
        result = run(people, "SELECT people")

        assert [r.payloads() for r in result.rows] == [
            ["Ann", 30, True],
            ["Bob", 17, False],
            ["Cid", 45, True],
        ]
        assert [r.index for r in result.rows] == [0, 1, 2]

    def test_select_filtered(self, people: QueryExecutor) -> None:
        result = run(people, "SELECT people age>=18 active=True")

        assert [r[0].value for r in result.rows] == ["Ann", "Cid"]
        assert result.affected_rows == 2

    def test_missing_table(self, executor: QueryExecutor) -> None:
        with pytest.raises(TableNotFoundError, match="no table `ghosts`"):
            run(executor, "SELECT ghosts")

    def test_rows_scanned_metric(self, people: QueryExecutor, metrics_registry: MetricsRegistry) -> None:
        run(people, "SELECT people age>40")

        assert metrics_registry.rows_scanned_total._value.get() == 3


@pytest.mark.unit
class TestInsert:
    """Tests for INSERT_INTO."""

    def test_colon_binding(self, people: QueryExecutor) -> None:
        """Both `=` and `:` bind insert values."""
        run(people, "INSERT_INTO people name:'Dee' age:22 active:False")

        rows = run(people, "SELECT people name='Dee'").rows
        assert rows[0].index == 3
        assert rows[0].payloads() == ["Dee", 22, False]

    def test_too_many_values(self, people: QueryExecutor) -> None:
        with pytest.raises(SchemaError, match="more columns than available"):
            run(people, "INSERT_INTO people name='X' age=1 active=True name='Y'")

    def test_too_few_values(self, people: QueryExecutor) -> None:
        with pytest.raises(SchemaError, match="got 2 value"):
            run(people, "INSERT_INTO people name='X' age=1")

    def test_unknown_column(self, people: QueryExecutor) -> None:
        with pytest.raises(SchemaError, match="no column `height`"):
            run(people, "INSERT_INTO people name='X' height=1 active=True")

    def test_invalid_literal(self, people: QueryExecutor) -> None:
        with pytest.raises(SchemaError, match="not a valid INTEGER"):
            run(people, "INSERT_INTO people name='X' age=old active=True")

    def test_comparison_rejected(self, people: QueryExecutor) -> None:
        with pytest.raises(ParseError):
            run(people, "INSERT_INTO people name='X' age>1 active=True")


@pytest.mark.unit
class TestUpdateDelete:
    """Tests for UPDATE and DELETE."""

    def test_update(self, people: QueryExecutor) -> None:
        result = run(people, "UPDATE people age<18 active:True age:18")

        assert result.affected_rows == 1
        rows = run(people, "SELECT people").rows
        assert [r.payloads() for r in rows] == [
            ["Ann", 30, True],
            ["Bob", 18, True],
            ["Cid", 45, True],
        ]

    def test_update_counts_unchanged_matches(self, people: QueryExecutor) -> None:
        """Every matching row counts, even when its values do not change."""
        result = run(people, "UPDATE people active=True active:True")

        assert result.affected_rows == 2

    def test_invalid_assignment_without_matches(self, people: QueryExecutor) -> None:
        """A bad assigned literal fails even when no row would be updated."""
        with pytest.raises(SchemaError, match="not a valid INTEGER"):
            run(people, "UPDATE people age>100 age:abc")

    def test_invalid_assignment_on_empty_table(self, executor: QueryExecutor, test_config: Config) -> None:
        run(executor, "DATASET empty a:INTEGER")

        with pytest.raises(SchemaError, match="not a valid INTEGER"):
            run(executor, "UPDATE empty a:abc")

        assert not (test_config.storage.data_dir / "empty").exists()

    def test_delete_preserves_indices(self, people: QueryExecutor) -> None:
        result = run(people, "DELETE people name='Bob'")

        assert result.affected_rows == 1
        rows = run(people, "SELECT people").rows
        assert [r.index for r in rows] == [0, 2]

    def test_delete_without_predicates_empties_table(self, people: QueryExecutor) -> None:
        assert run(people, "DELETE people").affected_rows == 3
        assert run(people, "SELECT people").rows == []

    def test_unknown_predicate_column(self, people: QueryExecutor, test_config: Config) -> None:
        """Predicate columns are checked before a replacement store is created."""
        with pytest.raises(SchemaError, match="no column `height`"):
            run(people, "DELETE people height>1")

        assert len(run(people, "SELECT people").rows) == 3
        data_dir: Path = test_config.storage.data_dir
        assert not any(p.name.startswith(test_config.storage.temp_prefix) for p in data_dir.iterdir())

    def test_mid_stream_failure_discards(
        self, people: QueryExecutor, metrics_registry: MetricsRegistry
    ) -> None:
        with pytest.raises(SchemaError):
            run(people, "UPDATE people age>abc age:1")

        assert [r.payloads()[1] for r in run(people, "SELECT people").rows] == [30, 17, 45]
        discarded = metrics_registry.store_replacements_total.labels("discarded")
        assert discarded._value.get() == 1
