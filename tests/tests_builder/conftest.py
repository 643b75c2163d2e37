"""
Shared fixtures and fakes for builder/ tests.

Key fixtures:
- fake_executor: records statements instead of running them
- builder_factory: QueryBuilder on table 't' wired to fake_executor
"""

from unittest.mock import MagicMock

import pytest

from builder.executor import ExecutionResult


class FakeExecutor:
    """Stand-in for StatementExecutor recording every call.

    Attributes:
        calls: List of (sql, params, named) tuples in call order
        results: Queue of ExecutionResult (or None for a failure) to return
    """

    def __init__(self):
        self.calls = []
        self.results = []
        self.last_error = None

    def queue(self, *results):
        self.results.extend(results)

    def execute(self, sql, params=None, named=None):
        self.calls.append((sql, list(params or []), dict(named) if named else None))
        if self.results:
            return self.results.pop(0)
        return ExecutionResult()


@pytest.fixture
def fake_executor():
    """A FakeExecutor with an empty result queue."""
    return FakeExecutor()


@pytest.fixture
def builder_factory(fake_executor, error_sink):
    """Factory creating QueryBuilder instances bound to the fake executor."""
    from builder.query_builder import QueryBuilder

    def factory(table="t", primary="id", model=None, fillables=None, defaults=None):
        builder = QueryBuilder(MagicMock(), errors=error_sink, executor=fake_executor)
        builder.set_data(table, primary, model)
        builder.set_fillables(fillables)
        builder.set_defaults(defaults)
        return builder

    return factory
