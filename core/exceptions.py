"""
=====================================
Error taxonomy for the query builder.
=====================================

Every non-fatal condition the builder can run into is modelled as a
``QueryBuilderError`` subclass. The builder never raises these across its
boundary: it hands them to ``logs.error_handler.ErrorLogger.report``, which
writes them to the log sink at the severity stored on the class, and the
terminal method returns ``None``.

Two conditions are raised to the caller instead:
    - RecordNotFound: ``first_or_fail`` / ``find_or_fail`` found nothing
    - ModelConfigurationError: a model class cannot produce a builder

Example:
    >>> from core.exceptions import InvalidOrderDirection
    >>> error = InvalidOrderDirection('sideways')
    >>> error.level
    'warning'
"""

from typing import Any


class QueryBuilderError(Exception):
    """Base class for conditions reported by the query builder.

    Attributes:
        level: Log severity used when the error is reported ('warning' or 'error')
    """

    level = 'error'


class InvalidOrderDirection(QueryBuilderError):
    """Order direction was not 'asc' or 'desc'."""

    level = 'warning'

    def __init__(self, direction: Any):
        self.direction = direction
        super().__init__(
            f'Order direction must be "asc" or "desc", got {direction!r}.'
        )


class InvalidOperatorCombination(QueryBuilderError):
    """Operator cannot be used with the given value (or is not an operator at all)."""

    def __init__(self, operator: Any, value: Any = None, message: str = None):
        self.operator = operator
        self.value = value
        super().__init__(
            message or f'Illegal operator and value combination: {operator!r} with {value!r}.'
        )


class InvalidConnector(QueryBuilderError):
    """Boolean connector joining predicates was not 'AND' or 'OR'."""

    def __init__(self, connector: Any):
        self.connector = connector
        super().__init__(
            f'Boolean connector must be "AND" or "OR", got {connector!r}.'
        )


class MissingFillableConfiguration(QueryBuilderError):
    """Insert attempted on a model that declares no fillable columns."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(
            f'No fillable columns declared for table "{table}"; insert aborted.'
        )


class NoInsertableColumns(QueryBuilderError):
    """Nothing left to insert after filtering the payload by the fillable columns."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(
            f'None of the given columns are fillable on table "{table}"; insert aborted.'
        )


class NoAssociatedRecord(QueryBuilderError):
    """Save called without a fetched row or without its primary key value."""

    def __init__(self, table: str, primary: str):
        self.table = table
        self.primary = primary
        super().__init__(
            f'No record of table "{table}" with a "{primary}" value is associated '
            f'with this builder; save aborted.'
        )


class MissingPrimaryKeyForDelete(QueryBuilderError):
    """Destroy called with neither an explicit key nor a fetched row."""

    def __init__(self, table: str, primary: str):
        self.table = table
        self.primary = primary
        super().__init__(
            f'A "{primary}" value is required to delete from table "{table}"; delete aborted.'
        )


class StatementExecutionFailure(QueryBuilderError):
    """The database driver rejected the prepared or executed statement."""

    def __init__(self, driver_message: str, sql: str = None):
        self.driver_message = driver_message
        self.sql = sql
        super().__init__(driver_message)


class RecordNotFound(LookupError):
    """No row matched a strict lookup (``first_or_fail`` / ``find_or_fail``).

    Raised rather than reported so the caller decides whether the miss ends
    the request, the process, or nothing at all.
    """

    def __init__(self, table: str, key: Any = None):
        self.table = table
        self.key = key
        if key is None:
            message = f'No record found in table "{table}".'
        else:
            message = f'No record found in table "{table}" for key {key!r}.'
        super().__init__(message)


class ModelConfigurationError(TypeError):
    """A model class is declared or used in a way that cannot produce a builder."""
    pass
