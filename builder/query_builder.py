"""
==========================
Fluent query builder.
==========================

``QueryBuilder`` accumulates WHERE predicates, ORDER BY terms, column
selection and pagination through chained calls, then runs one terminal
operation (``first``, ``get``, ``count``, ``save``, ``create``,
``destroy``) through a ``StatementExecutor``.

Error policy:
    Conditions such as an illegal operator, a bad order direction or a
    rejected statement are reported to the ``ErrorLogger`` sink and stored
    on ``last_error``; the call returns ``None`` (or, for ``order_by``,
    the builder without the bad term). Only ``first_or_fail`` raises
    (``RecordNotFound``).

Row tracking:
    A fetch returning exactly one row keeps it as ``current_row`` and a
    deep copy as ``original_row``. ``save()`` writes back only the columns
    whose values changed since that snapshot.

Example:
    >>> builder = QueryBuilder(provider).set_data('users', 'id')
    >>> adults = (builder.where('age', '>', 18)
    ...                  .order_by_desc('name')
    ...                  .limit(10)
    ...                  .get())
    >>>
    >>> user = QueryBuilder(provider).set_data('users', 'id').find(5)
    >>> user['name'] = 'Grace'
    >>> builder.save()
"""

import copy
import dataclasses
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from builder.differ import dirty_fields
from builder.executor import ExecutionResult, StatementExecutor, materialize
from core.exceptions import (
    InvalidConnector,
    InvalidOperatorCombination,
    InvalidOrderDirection,
    MissingFillableConfiguration,
    MissingPrimaryKeyForDelete,
    NoAssociatedRecord,
    NoInsertableColumns,
    QueryBuilderError,
    RecordNotFound,
)
from logs.error_handler import ErrorLogger
from sql.clauses import CONNECTORS, DIRECTIONS, OrderTerm, Predicate
from sql.dml import delete_builder, insert_builder, update_builder
from sql.operators import is_operator, prepare_value_and_operator
from sql.query_builder import pagination_builder, parse_columns, select_builder
from utils.database_utils import ConnectionProvider
from utils.helpers import is_blank

logger = logging.getLogger(__name__)

# Distinguishes "argument not passed" from an explicit None
_MISSING = object()

GroupCallback = Callable[['QueryBuilder'], Any]


class QueryBuilder:
    """Fluent SELECT/INSERT/UPDATE/DELETE builder bound to one table.

    Attributes:
        connection: Provider of the shared database handle
        errors: Sink for reported conditions
        table: Table name
        primary: Primary-key column name
        model: Class rows are materialized into (needs a ``hydrate`` classmethod)
        columns: Selected columns
        wheres: Accumulated predicates
        orders: Accumulated order terms
        limit_value: LIMIT, None when unset
        offset_value: OFFSET, None when unset
        fillables: Columns allowed in an INSERT payload
        defaults: Default values overlaid on INSERT payloads
        current_row: Row fetched last (mutable by the caller)
        original_row: Snapshot of current_row at fetch time
        pending_insert: INSERT payload while an insert runs
        pending_update: UPDATE payload while an update runs
        last_error: Last reported condition
    """

    def __init__(
        self,
        connection: ConnectionProvider,
        errors: Optional[ErrorLogger] = None,
        executor: Optional[StatementExecutor] = None
    ):
        self.connection = connection
        self.errors = errors or ErrorLogger()
        self.executor = executor or StatementExecutor(connection, self.errors)

        self.table = ''
        self.primary = 'id'
        self.model = None

        self.columns: List[str] = ['*']
        self.wheres: List[Predicate] = []
        self.orders: List[OrderTerm] = []
        self.limit_value: Optional[int] = None
        self.offset_value: Optional[int] = None

        self.fillables: Optional[List[str]] = None
        self.defaults: Optional[Dict[str, Any]] = None

        self.current_row: Optional[Dict[str, Any]] = None
        self.original_row: Optional[Dict[str, Any]] = None
        self.pending_insert: Optional[Dict[str, Any]] = None
        self.pending_update: Optional[Dict[str, Any]] = None
        self.last_error: Optional[QueryBuilderError] = None

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def set_data(self, table: str, primary: str = 'id', model: Any = None) -> 'QueryBuilder':
        """Set table, primary key and materialization target."""
        self.table = table
        self.primary = primary or 'id'
        self.model = model
        return self

    def set_fillables(self, fillables: Optional[Iterable[str]]) -> 'QueryBuilder':
        """Set the columns an INSERT may populate."""
        self.fillables = list(fillables) if fillables is not None else None
        return self

    def set_defaults(self, defaults: Optional[Mapping[str, Any]]) -> 'QueryBuilder':
        """Set default values for INSERT payloads."""
        self.defaults = dict(defaults) if defaults is not None else None
        return self

    def new_query_with_set_data(self) -> 'QueryBuilder':
        """Return a fresh builder for the same table, primary key and model."""
        scoped = QueryBuilder(self.connection, self.errors, self.executor)
        scoped.set_data(self.table, self.primary, self.model)
        scoped.set_fillables(self.fillables)
        scoped.set_defaults(self.defaults)
        return scoped

    def _report(self, error: QueryBuilderError) -> None:
        self.last_error = error
        return self.errors.report(error)

    # ------------------------------------------------------------------
    # Clause accumulation
    # ------------------------------------------------------------------

    def add_predicate(self, column: str, operator: str, value: Any, connector: str = 'AND') -> None:
        """Append a predicate without any validation."""
        self.wheres.append(Predicate(column, operator, value, connector))

    def where(
        self,
        column: Any,
        operator: Any = _MISSING,
        value: Any = _MISSING,
        connector: str = 'AND'
    ) -> Optional['QueryBuilder']:
        """
        Add a WHERE predicate.

        Forms:
            where('age', 18)                      -> age = ?
            where('age', '>', 18)                 -> age > ?
            where({'name': 'Ada', 'age': ('>', 18)})
            where([('age', '>', 18), ('name', 'Ada')])
            where(lambda query: query.where('age', '>', 18))

        Args:
            column: Column name, mapping, list of tuples, or group callback
            operator: Operator, or the value in the two-argument form
            value: Value bound to the placeholder
            connector: 'AND' or 'OR', joining this predicate to the previous one

        Returns:
            The builder, or None when the operator/value pair was rejected
        """
        connector = connector.upper()
        if connector not in CONNECTORS:
            return self._report(InvalidConnector(connector))

        if isinstance(column, (Mapping, list)):
            return self._add_where_many(column, connector)

        if callable(column):
            return self._where_group(column, connector)

        use_default = value is _MISSING
        operator = None if operator is _MISSING else operator
        value = None if value is _MISSING else value

        try:
            value, operator = prepare_value_and_operator(value, operator, use_default)
        except InvalidOperatorCombination as e:
            return self._report(e)

        if is_blank(value) and not is_operator(operator):
            # where(column, value, None): the "operator" slot holds the value
            value, operator = operator, '='

        if not is_operator(operator):
            return self._report(InvalidOperatorCombination(
                operator, value, message=f"Unknown operator {operator!r}."
            ))

        self.add_predicate(column, operator, value, connector)
        return self

    def or_where(self, column: Any, operator: Any = _MISSING, value: Any = _MISSING) -> Optional['QueryBuilder']:
        """Add a predicate joined with OR."""
        return self.where(column, operator, value, connector='OR')

    def _add_where_many(self, wheres: Any, connector: str) -> Optional['QueryBuilder']:
        """Add several predicates from a mapping or a list of tuples."""
        if isinstance(wheres, Mapping):
            items = []
            for column, value in wheres.items():
                if isinstance(value, (list, tuple)) and len(value) == 2:
                    items.append((column, value[0], value[1]))
                else:
                    items.append((column, '=', value))
        else:
            items = [tuple(item) for item in wheres]

        for item in items:
            if len(item) == 2:
                result = self.where(item[0], item[1], connector=connector)
            else:
                result = self.where(*item[:3], connector=connector)
            if result is None:
                return None

        return self

    def _where_group(self, callback: GroupCallback, connector: str = 'AND') -> Optional['QueryBuilder']:
        """
        Run a callback against a scoped builder and keep its predicates.

        The scoped builder shares table, primary key and model. Its predicates
        are appended to this builder in order, without parentheses; the first
        one is joined with ``connector``. The scoped builder itself is
        discarded. Only errors (not warnings) raised inside the callback
        make the group fail.
        """
        scoped = self.new_query_with_set_data()
        callback(scoped)

        error = scoped.last_error
        if error is not None:
            self.last_error = error
            if error.level == 'error':
                return None

        if scoped.wheres:
            scoped.wheres[0] = dataclasses.replace(scoped.wheres[0], connector=connector)
        self.wheres.extend(scoped.wheres)
        return self

    def order_by(self, column: str, direction: str = 'asc') -> 'QueryBuilder':
        """
        Add an ORDER BY term.

        Args:
            column: Column name
            direction: 'asc' or 'desc', any case

        Returns:
            The builder; an invalid direction is reported and the term dropped
        """
        normalized = direction.lower() if isinstance(direction, str) else direction
        if normalized not in DIRECTIONS:
            self._report(InvalidOrderDirection(direction))
            return self

        self.orders.append(OrderTerm(column, normalized))
        return self

    def order_by_desc(self, column: str) -> 'QueryBuilder':
        """Add a descending ORDER BY term."""
        return self.order_by(column, 'desc')

    def latest(self, column: Optional[str] = None) -> 'QueryBuilder':
        """Order by ``column`` (the primary key by default), newest first."""
        return self.order_by(column or self.primary, 'desc')

    def limit(self, limit: int) -> 'QueryBuilder':
        """Limit the number of rows; negative values are ignored."""
        if limit >= 0:
            self.limit_value = limit
        return self

    def take(self, limit: int) -> 'QueryBuilder':
        """Alias of ``limit``."""
        return self.limit(limit)

    def offset(self, offset: int) -> 'QueryBuilder':
        """Skip rows; negative values are ignored."""
        if offset >= 0:
            self.offset_value = offset
        return self

    def skip(self, offset: int) -> 'QueryBuilder':
        """Alias of ``offset``."""
        return self.offset(offset)

    def for_page(self, page: int, per_page: int = 15) -> 'QueryBuilder':
        """Set LIMIT/OFFSET for a 1-based page."""
        pagination = pagination_builder(page, per_page)
        return self.limit(pagination['limit']).offset(pagination['offset'])

    def only(self, columns: Any) -> 'QueryBuilder':
        """Select columns from a comma-separated string or a sequence."""
        if callable(columns):
            return self
        self.columns = parse_columns(columns)
        return self

    def to_sql(self) -> Tuple[str, List[Any]]:
        """Render the SELECT statement without running it."""
        return select_builder(
            self.table,
            self.columns,
            self.wheres,
            self.orders,
            self.limit_value,
            self.offset_value
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _hydrate(self, row: Dict[str, Any], builder: 'QueryBuilder') -> Any:
        """Build the return object for one row, bound to ``builder``."""
        builder.current_row = row
        builder.original_row = copy.deepcopy(row)
        if self.model is None:
            return row
        return self.model.hydrate(row, builder)

    def _detached_instance(self, row: Dict[str, Any]) -> Any:
        """Instance of a multi-row result, tracked by its own builder."""
        return self._hydrate(row, self.new_query_with_set_data())

    def _query_results(self, return_instance: bool = False, return_count: bool = False) -> Any:
        """Run the accumulated SELECT and shape the result."""
        sql, params = self.to_sql()
        result = self.executor.execute(sql, params)

        if result is None:
            self.last_error = self.executor.last_error
            return None

        if return_count:
            return result.rowcount

        if len(result.rows) == 1:
            row = result.rows[0]
            if return_instance:
                return self._hydrate(row, self)
            self.current_row = row
            self.original_row = copy.deepcopy(row)
            return row

        return materialize(result.rows, return_instance, self._detached_instance)

    def first(self, columns: Any = None) -> Any:
        """
        Fetch the first matching row.

        Args:
            columns: Optional column selection

        Returns:
            Model instance (or dict without a model), None when nothing matched
        """
        if columns:
            self.only(columns)

        self.limit(1)
        return self._query_results(return_instance=True)

    def first_or(self, columns: Any = None, callback: Optional[Callable[[], Any]] = None) -> Any:
        """Fetch the first row, or return ``callback()`` when nothing matched."""
        if callable(columns):
            callback, columns = columns, None

        result = self.first(columns)
        if result is not None:
            return result

        return callback() if callback is not None else None

    def first_or_fail(self, columns: Any = None) -> Any:
        """
        Fetch the first row or raise.

        Raises:
            RecordNotFound: If no row matched
        """
        result = self.first(columns)
        if result is None:
            raise RecordNotFound(self.table)
        return result

    def find(self, key: Any, columns: Any = None) -> Any:
        """Fetch the row whose primary key equals ``key``."""
        return self.where(self.primary, key).first(columns)

    def get(self, columns: Any = None, as_instances: bool = False) -> Any:
        """
        Fetch all matching rows.

        Args:
            columns: Optional column selection
            as_instances: Materialize into the model instead of dicts

        Returns:
            None for no rows, one row for a single match, a list otherwise
        """
        if columns:
            self.only(columns)

        return self._query_results(return_instance=as_instances)

    def count(self) -> Optional[int]:
        """Number of rows the accumulated SELECT matches."""
        return self._query_results(return_count=True)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self) -> Optional[bool]:
        """
        Write changed columns of the fetched row back to the table.

        Returns:
            True when updated or when nothing changed, None on failure
        """
        primary_value = (self.original_row or {}).get(self.primary)
        if self.current_row is None or is_blank(primary_value):
            return self._report(NoAssociatedRecord(self.table, self.primary))

        self.pending_update = dirty_fields(
            self.current_row, self.original_row, exclude=(self.primary,)
        )

        try:
            if not self.pending_update:
                return True

            sql = update_builder(
                self.table, list(self.pending_update), self.primary, primary_value
            )
            result = self.executor.execute(sql, named=self.pending_update)
        finally:
            self.pending_update = None

        if result is None:
            self.last_error = self.executor.last_error
            return None

        self.original_row = copy.deepcopy(self.current_row)
        return True

    def _build_insert_payload(self, data: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        if not self.fillables:
            return self._report(MissingFillableConfiguration(self.table))

        payload = {key: value for key, value in data.items() if key in self.fillables}
        if not payload:
            return self._report(NoInsertableColumns(self.table))

        for key, value in (self.defaults or {}).items():
            payload.setdefault(key, value)

        return payload

    def create(self, data: Mapping[str, Any]) -> Any:
        """
        Insert a row built from the fillable entries of ``data``.

        Default attributes fill in keys ``data`` does not provide.

        Args:
            data: Column values

        Returns:
            The inserted row as a model instance (or dict), None on failure
        """
        self.pending_insert = self._build_insert_payload(data)
        if self.pending_insert is None:
            return None

        try:
            sql = insert_builder(self.table, list(self.pending_insert))
            result = self.executor.execute(sql, named=self.pending_insert)
            row = dict(self.pending_insert)
        finally:
            self.pending_insert = None

        if result is None:
            self.last_error = self.executor.last_error
            return None

        if self.primary not in row and result.lastrowid:
            row[self.primary] = result.lastrowid

        return self._hydrate(row, self)

    def destroy(self, key: Any = None) -> Optional[int]:
        """
        Delete a row by primary key.

        Args:
            key: Primary-key value; defaults to the fetched row's

        Returns:
            Number of deleted rows, None on failure
        """
        if key is None:
            key = (self.original_row or {}).get(self.primary)

        if is_blank(key):
            return self._report(MissingPrimaryKeyForDelete(self.table, self.primary))

        sql, params = delete_builder(self.table, [Predicate(self.primary, '=', key)])
        result: Optional[ExecutionResult] = self.executor.execute(sql, params)

        if result is None:
            self.last_error = self.executor.last_error
            return None

        if (self.original_row or {}).get(self.primary) == key:
            self.original_row = None
            self.current_row = None

        return result.rowcount

    def __getattr__(self, name: str) -> Any:
        raise AttributeError(f"Method [{name}] does not exist on the builder instance.")
