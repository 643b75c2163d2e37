"""
=====================================
Fluent builder package.
=====================================

Modules:
    query_builder: QueryBuilder, clause accumulation and terminal operations
    executor: StatementExecutor (bind + execute) and materialize
    differ: dirty_fields, the UPDATE payload of a fetched row

Example:
    >>> from builder import QueryBuilder
    >>> from utils.database_utils import ConnectionProvider
    >>>
    >>> query = QueryBuilder(ConnectionProvider()).set_data('users', 'id')
    >>> query.where('age', '>', 18).latest().take(5).get()
"""

__version__ = "0.1.0"
__all__ = ['QueryBuilder', 'StatementExecutor', 'ExecutionResult', 'materialize', 'dirty_fields']

from builder.differ import dirty_fields
from builder.executor import ExecutionResult, StatementExecutor, materialize
from builder.query_builder import QueryBuilder
