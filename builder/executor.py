"""
==============================================
Statement execution and result materialization.
==============================================

Takes assembled SQL, binds its parameters and runs it through the
connection provider; then shapes the fetched rows for the caller.

Binding:
    - Positional ``?`` placeholders (SELECT/DELETE) are rewritten to
      ``:param_N`` and bound as typed ``bindparam`` objects, the type
      chosen from the runtime value (str, int, bool, None; anything
      else binds as a string).
    - Named ``:column`` placeholders (INSERT/UPDATE) bind untyped.

Failures:
    A ``SQLAlchemyError`` raised while executing is reported as
    ``StatementExecutionFailure`` and ``execute`` returns ``None``. The
    driver exception never reaches the builder's caller.

Example:
    >>> executor = StatementExecutor(provider, ErrorLogger())
    >>> result = executor.execute("SELECT * FROM users WHERE id = ?", [5])
    >>> materialize(result.rows, return_instance=False)
    {'id': 5, 'name': 'Ada'}
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from sqlalchemy import Boolean, Integer, String, bindparam
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import TextClause
from sqlalchemy.types import NullType, TypeEngine

from core.exceptions import StatementExecutionFailure
from logs.error_handler import ErrorLogger
from utils.database_utils import ConnectionProvider

logger = logging.getLogger(__name__)

POSITIONAL_PLACEHOLDER = '?'


def get_param_type(value: Any) -> TypeEngine:
    """Pick the SQLAlchemy bind type for a runtime value."""
    if value is None:
        return NullType()
    if isinstance(value, bool):
        return Boolean()
    if isinstance(value, int):
        return Integer()
    return String()


@dataclass
class ExecutionResult:
    """Outcome of one executed statement.

    Attributes:
        rows: Fetched rows as dicts (empty for statements returning no rows)
        rowcount: Rows affected as reported by the driver
        lastrowid: Driver-reported id of an inserted row, when available
    """

    rows: List[Dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0
    lastrowid: Optional[Any] = None


class StatementExecutor:
    """Prepare, bind and run statements against a connection provider.

    Attributes:
        connection: Provider of the shared engine
        errors: Sink receiving execution failures
    """

    def __init__(self, connection: ConnectionProvider, errors: Optional[ErrorLogger] = None):
        self.connection = connection
        self.errors = errors or ErrorLogger()
        self.last_error: Optional[StatementExecutionFailure] = None

    def prepare(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None
    ) -> TextClause:
        """
        Turn SQL text into a statement, binding positional values.

        Args:
            sql: SQL text, possibly holding '?' placeholders
            params: Values for the '?' placeholders, in order

        Returns:
            Executable TextClause

        Raises:
            ValueError: If placeholder and value counts differ
        """
        if not params:
            return self.connection.prepare(sql)

        params = list(params)
        segments = sql.split(POSITIONAL_PLACEHOLDER)

        if len(segments) - 1 != len(params):
            raise ValueError(
                f"Statement has {len(segments) - 1} placeholders but {len(params)} values"
            )

        names = [f"param_{index}" for index in range(1, len(params) + 1)]
        rendered = segments[0] + "".join(
            f":{name}{segment}" for name, segment in zip(names, segments[1:])
        )

        statement = self.connection.prepare(rendered)
        return statement.bindparams(*[
            bindparam(name, value, type_=get_param_type(value))
            for name, value in zip(names, params)
        ])

    def execute(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        named: Optional[Mapping[str, Any]] = None
    ) -> Optional[ExecutionResult]:
        """
        Execute one statement in its own transaction.

        Args:
            sql: SQL text
            params: Positional values for '?' placeholders
            named: Values for ':name' placeholders

        Returns:
            ExecutionResult, or None when the driver rejected the statement
        """
        statement = self.prepare(sql, params)
        logger.debug(f"Executing: {sql}")

        try:
            with self.connection.get_handle().begin() as conn:
                result = conn.execute(statement, dict(named or {}))

                if result.returns_rows:
                    rows = [dict(row) for row in result.mappings().all()]
                    return ExecutionResult(rows=rows, rowcount=len(rows))

                return ExecutionResult(
                    rowcount=result.rowcount,
                    lastrowid=getattr(result, 'lastrowid', None)
                )
        except SQLAlchemyError as e:
            driver_error = getattr(e, 'orig', None) or e
            self.last_error = StatementExecutionFailure(str(driver_error), sql=sql)
            return self.errors.report(self.last_error)


def materialize(
    rows: Sequence[Dict[str, Any]],
    return_instance: bool = False,
    factory: Optional[Callable[[Dict[str, Any]], Any]] = None
) -> Any:
    """
    Shape fetched rows for the caller.

    Args:
        rows: Fetched rows
        return_instance: Build objects with ``factory`` instead of returning dicts
        factory: Row-to-object callable used when return_instance is set

    Returns:
        None for no rows, a single dict/object for one row, a list otherwise
    """
    if not rows:
        return None

    build = factory if (return_instance and factory is not None) else (lambda row: row)

    if len(rows) > 1:
        return [build(row) for row in rows]

    return build(rows[0])
