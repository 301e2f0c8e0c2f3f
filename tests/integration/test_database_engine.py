"""Integration tests for DatabaseEngine."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from flatdb.adapters.outbound.file_schema_catalog import RECORD_SIZE
from flatdb.application import DatabaseEngine
from flatdb.domain.value_objects import QueryKind
from flatdb.infrastructure.config import Config
from flatdb.infrastructure.metrics import MetricsRegistry


def leftover_temp_files(config: Config) -> list[Path]:
    prefix = config.storage.temp_prefix
    return [p for p in config.storage.data_dir.iterdir() if p.name.startswith(prefix)]


@pytest.mark.integration
class TestDatabaseEngine:
    """Test cases for DatabaseEngine."""

    def test_create_table(self, engine: DatabaseEngine, output: io.StringIO) -> None:
        """Successful non-SELECT queries print nothing."""
        result = engine.execute("DATASET users id:INTEGER name:STRING")

        assert result.success
        assert result.query_kind is QueryKind.CREATE
        assert output.getvalue() == ""

    def test_duplicate_create(self, engine: DatabaseEngine, test_config: Config, output: io.StringIO) -> None:
        """Creating a table twice keeps one record and reports the second call."""
        assert engine.execute_query("DATASET T id:INTEGER") == 0
        assert engine.execute_query("DATASET T id:INTEGER age:INTEGER") == 1

        assert test_config.storage.catalog_path.stat().st_size == RECORD_SIZE
        assert engine.catalog.find_schema("T").column_count == 1
        assert "same name" in output.getvalue()

    def test_filter_conjunction(self, engine: DatabaseEngine, output: io.StringIO) -> None:
        """SELECT returns only rows satisfying the predicate."""
        engine.execute_many([
            "DATASET people id:INTEGER age:INTEGER",
            "INSERT_INTO people id=1 age=20",
            "INSERT_INTO people id=2 age=15",
        ])

        result = engine.execute("SELECT people age>=18")

        assert [row.payloads() for row in result.rows] == [[1, 20]]
        assert output.getvalue() == "         1|\t        20|\t\n"

    def test_update_unknown_column_is_atomic(
        self, engine: DatabaseEngine, test_config: Config, output: io.StringIO
    ) -> None:
        """A failed UPDATE leaves the store byte-identical with no temporary file."""
        engine.execute_many([
            "DATASET people id:INTEGER age:INTEGER",
            "INSERT_INTO people id=1 age=20",
            "INSERT_INTO people id=2 age=15",
        ])
        store = test_config.storage.data_dir / "people"
        before = store.read_bytes()

        result = engine.execute("UPDATE people height>3 age:99")

        assert result.failed
        assert "no column `height`" in result.message
        assert output.getvalue() == f"error: {result.message}\n"
        assert store.read_bytes() == before
        assert leftover_temp_files(test_config) == []

    def test_insert_then_select(self, engine: DatabaseEngine) -> None:
        """An inserted row comes back unchanged, with quotes stripped."""
        engine.execute("DATASET users name:STRING height:NUMBER admin:BOOLEAN")
        engine.execute("INSERT_INTO users name='Ada Lovelace' height=1.65 admin=True")

        rows = engine.execute("SELECT users").rows

        assert len(rows) == 1
        assert rows[0].payloads() == ["Ada Lovelace", 1.65, True]

    def test_delete_matching_subset(self, engine: DatabaseEngine, test_config: Config) -> None:
        """DELETE keeps exactly the non-matching rows, in order."""
        engine.execute("DATASET nums n:INTEGER")
        for n in range(10):
            engine.execute(f"INSERT_INTO nums n={n}")

        result = engine.execute("DELETE nums n>=3 n<7")

        assert result.affected_rows == 4
        remaining = engine.execute("SELECT nums").rows
        assert [row[0].value for row in remaining] == [0, 1, 2, 7, 8, 9]
        lines = (test_config.storage.data_dir / "nums").read_text().splitlines()
        assert len(lines) == 6
        assert leftover_temp_files(test_config) == []

    def test_update(self, engine: DatabaseEngine) -> None:
        engine.execute_many([
            "DATASET users name:STRING age:INTEGER",
            "INSERT_INTO users name='Ann' age=17",
            "INSERT_INTO users name='Bob' age=40",
        ])

        result = engine.execute("UPDATE users name='Ann' age:18")

        assert result.success
        assert result.affected_rows == 1
        assert [r.payloads() for r in engine.execute("SELECT users").rows] == [
            ["Ann", 18],
            ["Bob", 40],
        ]

    def test_state_is_on_disk_only(self, test_config: Config, metrics_registry: MetricsRegistry) -> None:
        """A second engine over the same directory sees the first one's data."""
        first = DatabaseEngine(config=test_config, metrics=metrics_registry, output=io.StringIO())
        first.execute("DATASET users name:STRING")
        first.execute("INSERT_INTO users name='Ann'")

        second = DatabaseEngine(config=test_config, metrics=metrics_registry, output=io.StringIO())
        assert second.execute("SELECT users").rows[0].payloads() == ["Ann"]


@pytest.mark.integration
class TestQueryFailures:
    """Test cases for reported failures."""

    def test_unknown_command_is_noop(self, engine: DatabaseEngine, output: io.StringIO) -> None:
        """Unrecognized command words succeed without output."""
        result = engine.execute("DROP users")

        assert result.success
        assert result.query_kind is QueryKind.INVALID
        assert output.getvalue() == ""

    def test_parse_error(
        self, engine: DatabaseEngine, output: io.StringIO, metrics_registry: MetricsRegistry
    ) -> None:
        assert engine.execute_query("SELECT users name='Bob") == 1

        assert output.getvalue().startswith("error: cannot parse query")
        assert metrics_registry.parse_errors_total._value.get() == 1

    def test_missing_table(self, engine: DatabaseEngine, output: io.StringIO) -> None:
        assert engine.execute_query("SELECT nowhere") == 1
        assert output.getvalue() == "error: no table `nowhere`\n"

    def test_insert_into_corrupt_store(
        self, engine: DatabaseEngine, test_config: Config, output: io.StringIO
    ) -> None:
        """Undecodable store bytes are reported for INSERT as for SELECT."""
        engine.execute("DATASET t a:INTEGER")
        (test_config.storage.data_dir / "t").write_bytes(b"0;\xff\n")

        selected = engine.execute("SELECT t")
        inserted = engine.execute("INSERT_INTO t a=1")

        assert selected.failed
        assert inserted.failed
        assert "not valid utf-8" in inserted.message
        assert output.getvalue().count("error: ") == 2

    @pytest.mark.parametrize(
        "query",
        ["INSERT_INTO s n=\udcff", "DATASET \udcff n:STRING", "DATASET u n\udcff:STRING"],
    )
    def test_unencodable_query_text(
        self, engine: DatabaseEngine, test_config: Config, output: io.StringIO, query: str
    ) -> None:
        """Lone surrogates in query text are reported, never raised."""
        engine.execute("DATASET s n:STRING")

        result = engine.execute(query)

        assert result.failed
        assert "not valid UTF-8" in result.message
        assert "\\udcff" in output.getvalue()
        assert not (test_config.storage.data_dir / "s").exists()

    def test_failure_metrics(self, engine: DatabaseEngine, metrics_registry: MetricsRegistry) -> None:
        engine.execute("DATASET t a:INTEGER")
        engine.execute("INSERT_INTO t a=x")

        registry = metrics_registry.queries_total
        assert registry.labels("create", "success")._value.get() == 1
        assert registry.labels("insert", "error")._value.get() == 1

    def test_default_output_is_stdout(
        self, test_config: Config, metrics_registry: MetricsRegistry, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Without an explicit sink, SELECT rows go to stdout."""
        engine = DatabaseEngine(config=test_config, metrics=metrics_registry)
        engine.execute("DATASET flags on:BOOLEAN")
        engine.execute("INSERT_INTO flags on=False")
        engine.execute("SELECT flags")

        assert "False     |\t" in capsys.readouterr().out.splitlines()
