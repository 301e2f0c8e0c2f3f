"""Pytest configuration and fixtures for flatdb tests."""

from __future__ import annotations

import io
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from flatdb.application import DatabaseEngine
from flatdb.infrastructure.config import Config, StorageConfig
from flatdb.infrastructure.container import Container, reset_container
from flatdb.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration rooted in a temporary directory."""
    return Config(storage=StorageConfig(data_dir=temp_dir / "data"))


@pytest.fixture
def container() -> Generator[Container, None, None]:
    """Provide a fresh DI container for each test."""
    reset_container()
    c = Container()
    yield c
    c.clear()


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def output() -> io.StringIO:
    """Capture what the engine prints."""
    return io.StringIO()


@pytest.fixture
def engine(
    test_config: Config, metrics_registry: MetricsRegistry, output: io.StringIO
) -> DatabaseEngine:
    """Provide an engine over an empty data directory."""
    return DatabaseEngine(config=test_config, metrics=metrics_registry, output=output)


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
