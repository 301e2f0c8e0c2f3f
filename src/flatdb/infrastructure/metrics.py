"""Prometheus metrics for the data manager."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all data manager metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Query metrics
        self.queries_total = Counter(
            "flatdb_queries_total",
            "Total number of queries executed",
            ["query_kind", "status"],  # status: success, error
            registry=self._registry,
        )

        self.query_latency_seconds = Histogram(
            "flatdb_query_latency_seconds",
            "Query latency in seconds",
            ["query_kind"],  # create, select, insert, update, delete
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        self.parse_errors_total = Counter(
            "flatdb_parse_errors_total",
            "Total number of query strings rejected by the tokenizer",
            registry=self._registry,
        )

        # Row store metrics
        self.rows_scanned_total = Counter(
            "flatdb_rows_scanned_total",
            "Total rows decoded from row stores",
            registry=self._registry,
        )

        self.rows_written_total = Counter(
            "flatdb_rows_written_total",
            "Total rows affected by data changes",
            ["operation"],  # insert, update, delete
            registry=self._registry,
        )

        self.store_replacements_total = Counter(
            "flatdb_store_replacements_total",
            "Atomic row store replacements",
            ["outcome"],  # committed, discarded
            registry=self._registry,
        )

        # Server info
        self.info = Info(
            "flatdb",
            "Data manager information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from flatdb import __version__
    _metrics.info.info({
        "version": __version__,
    })

    # Start HTTP server for Prometheus scraping
    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
