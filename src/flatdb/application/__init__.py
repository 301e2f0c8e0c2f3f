"""Application layer for the data manager.

The application layer orchestrates domain logic to fulfill queries.

Exports:
    DatabaseEngine:
        - DatabaseEngine: Main entry point (Parse -> Classify -> Dispatch)
    Executor:
        - QueryExecutor: CREATE/SELECT/INSERT/UPDATE/DELETE handlers
        - ExecutionResult: Result of query execution
"""

from flatdb.application.database_engine import DatabaseEngine
from flatdb.application.executor import ExecutionResult, QueryExecutor

__all__ = [
    "DatabaseEngine",
    "QueryExecutor",
    "ExecutionResult",
]
