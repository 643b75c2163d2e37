"""
====================================================
SQL utilities package for the fluent query builder.
====================================================

This package provides the pure SQL layer: operator validation, clause
value types and statement assemblers. Nothing in it opens a connection.

The package follows a clear organization:
    - clauses.py: Predicate and OrderTerm value types
    - operators.py: Operator set and operator/value validation
    - query_builder.py: SELECT assembly (_builder suffix)
    - dml.py: INSERT/UPDATE/DELETE assembly

Architecture:
    - All builders end with '_builder' suffix (e.g., select_builder, insert_builder)
    - dml.py imports from query_builder.py (not vice versa)
    - WHERE values use positional '?' placeholders, INSERT/UPDATE use ':column'

Example:
    >>> from sql.clauses import Predicate
    >>> from sql.query_builder import select_builder
    >>> from sql.dml import insert_builder
    >>>
    >>> select_builder('users', predicates=[Predicate('id', '=', 5)], limit=1)
    ('SELECT * FROM users WHERE id = ? LIMIT 1', [5])
    >>> insert_builder('users', ['name', 'age'])
    'INSERT INTO users (name, age) VALUES (:name, :age)'
"""

__version__ = "1.0.0"
__all__ = [
    # Clauses
    'OrderTerm', 'Predicate',
    # Operators
    'OPERATORS', 'is_operator', 'prepare_value_and_operator',
    # Query builders
    'select_builder', 'where_builder', 'order_by_builder', 'columns_builder',
    'parse_columns', 'pagination_builder',
    # DML builders
    'insert_builder', 'update_builder', 'delete_builder', 'format_literal',
]

from .clauses import OrderTerm, Predicate
from .dml import delete_builder, format_literal, insert_builder, update_builder
from .operators import OPERATORS, is_operator, prepare_value_and_operator
from .query_builder import (
    columns_builder,
    order_by_builder,
    pagination_builder,
    parse_columns,
    select_builder,
    where_builder,
)
