"""Dependency injection container."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from flatdb.infrastructure.config import Config
from flatdb.infrastructure.metrics import MetricsRegistry, get_metrics

T = TypeVar("T")


class Container:
    """
    Simple dependency injection container.

    Supports singleton and factory registrations with lazy initialization.
    """

    def __init__(self) -> None:
        """Initialize the container."""
        self._singletons: dict[type, Any] = {}
        self._factories: dict[type, Callable[[Container], Any]] = {}
        self._instances: dict[type, Any] = {}

    def register_singleton(self, interface: type[T], instance: T) -> None:
        """
        Register a singleton instance.

        Args:
            interface: The interface/type to register
            instance: The singleton instance
        """
        self._singletons[interface] = instance
        self._instances[interface] = instance

    def register_factory(
        self,
        interface: type[T],
        factory: Callable[[Container], T],
    ) -> None:
        """
        Register a factory function for lazy instantiation.

        Args:
            interface: The interface/type to register
            factory: Factory function that takes the container and returns an instance
        """
        self._factories[interface] = factory

    def resolve(self, interface: type[T]) -> T:
        """
        Resolve a dependency.

        Args:
            interface: The interface/type to resolve

        Returns:
            The resolved instance

        Raises:
            KeyError: If no registration exists for the interface
        """
        if interface in self._instances:
            return self._instances[interface]

        if interface in self._factories:
            instance = self._factories[interface](self)
            self._instances[interface] = instance
            return instance

        raise KeyError(f"No registration found for {interface}")

    def has(self, interface: type) -> bool:
        """Check if an interface is registered."""
        return (
            interface in self._singletons
            or interface in self._factories
            or interface in self._instances
        )

    def clear(self) -> None:
        """Clear all registrations and instances."""
        self._singletons.clear()
        self._factories.clear()
        self._instances.clear()


def build_container(
    config: Config,
    metrics: MetricsRegistry | None = None,
    setup_observability: bool = False,
) -> Container:
    """
    Wire the data manager components.

    Args:
        config: Configuration to register
        metrics: Metrics registry (global registry if None)
        setup_observability: Configure logging and tracing from ``config``

    Returns:
        A container resolving Config, MetricsRegistry, SchemaCatalog,
        RowStore and DatabaseEngine
    """
    # Imported here: the adapters and the engine import this package.
    from flatdb.adapters.outbound import FileRowStore, FileSchemaCatalog
    from flatdb.application import DatabaseEngine
    from flatdb.ports.outbound import RowStore, SchemaCatalog

    if setup_observability:
        from flatdb.infrastructure.logging import setup_logging
        from flatdb.infrastructure.tracing import setup_tracing

        observability = config.observability
        setup_logging(observability.log_level, observability.log_format)
        setup_tracing(observability.otel_service_name, observability.otel_endpoint)

    container = Container()
    container.register_singleton(Config, config)
    container.register_singleton(MetricsRegistry, metrics or get_metrics())
    container.register_factory(
        SchemaCatalog,
        lambda c: FileSchemaCatalog(c.resolve(Config).storage.catalog_path),
    )
    container.register_factory(
        RowStore,
        lambda c: FileRowStore(
            data_dir=c.resolve(Config).storage.data_dir,
            encoding=c.resolve(Config).storage.encoding,
            temp_prefix=c.resolve(Config).storage.temp_prefix,
        ),
    )
    container.register_factory(
        DatabaseEngine,
        lambda c: DatabaseEngine(
            config=c.resolve(Config),
            catalog=c.resolve(SchemaCatalog),
            row_store=c.resolve(RowStore),
            metrics=c.resolve(MetricsRegistry),
        ),
    )
    return container


# Global container instance
_container: Container | None = None


def get_container() -> Container:
    """Get the global container instance."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Reset the global container (useful for testing)."""
    global _container
    if _container is not None:
        _container.clear()
    _container = None
