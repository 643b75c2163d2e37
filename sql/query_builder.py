"""
============================
SQL Query Builder Utilities.
============================

Low-level, pure building blocks for SELECT statements. All builders follow
the _builder naming convention and never touch a connection.

WHERE values are always emitted as positional ``?`` placeholders; the
matching values are returned alongside the SQL, in placeholder order.

Query Builders:
- columns_builder: Render the selected column list
- where_builder: Render predicates into a WHERE clause plus parameters
- order_by_builder: Render order terms, merging adjacent equal directions
- pagination_builder: Compute LIMIT and OFFSET for a page number
- select_builder: Assemble a complete SELECT statement

Usage:
    from sql.clauses import OrderTerm, Predicate
    from sql.query_builder import select_builder

    sql, params = select_builder(
        table='users',
        predicates=[Predicate('age', '>', 18)],
        orders=[OrderTerm('name', 'desc')],
        limit=10
    )
    # sql    == 'SELECT * FROM users WHERE age > ? ORDER BY name DESC LIMIT 10'
    # params == [18]
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from sql.clauses import OrderTerm, Predicate
from utils.helpers import clear_values, is_blank


def parse_columns(columns: Union[str, Sequence[str], None]) -> List[str]:
    """
    Normalize a column selection into a list.

    Args:
        columns: Comma-separated string, sequence of names, or None

    Returns:
        List of column names with blank entries removed, ['*'] when empty
    """
    if columns is None or (isinstance(columns, str) and is_blank(columns.strip())):
        return ['*']

    if isinstance(columns, str):
        parsed = clear_values(part.strip() for part in columns.split(','))
    else:
        parsed = clear_values(
            column.strip() if isinstance(column, str) else column
            for column in columns
        )

    return parsed or ['*']


def columns_builder(columns: Optional[Sequence[str]] = None) -> str:
    """Render a column list, '*' when nothing is selected."""
    return ", ".join(parse_columns(columns))


def where_builder(predicates: Sequence[Predicate]) -> Tuple[str, List[Any]]:
    """
    Build a WHERE clause from ordered predicates.

    The first predicate opens the clause; every following one is prefixed
    with its own connector. No parentheses are emitted.

    Args:
        predicates: Predicates in emission order

    Returns:
        Tuple of (clause including the WHERE keyword or '', bound values)
    """
    clause = ""
    params: List[Any] = []

    for predicate in predicates:
        if clause:
            clause += f" {predicate.connector} {predicate.column} {predicate.operator} ?"
        else:
            clause = f"WHERE {predicate.column} {predicate.operator} ?"
        params.append(predicate.value)

    return clause, params


def order_by_builder(orders: Sequence[OrderTerm]) -> str:
    """
    Build an ORDER BY clause.

    A direction keyword is written only where the next term changes
    direction (or at the end), so ``a asc, b asc`` renders as
    ``ORDER BY a, b ASC``.

    Args:
        orders: Order terms in emission order

    Returns:
        ORDER BY clause, or '' when there are no terms
    """
    if not orders:
        return ""

    segments = []
    for index, order in enumerate(orders):
        following = orders[index + 1] if index + 1 < len(orders) else None
        if following is not None and following.direction == order.direction:
            segments.append(order.column)
        else:
            segments.append(f"{order.column} {order.direction.upper()}")

    return "ORDER BY " + ", ".join(segments)


def pagination_builder(page: int, page_size: int) -> Dict[str, int]:
    """
    Calculate LIMIT and OFFSET for pagination.

    Args:
        page: Page number (1-based)
        page_size: Number of records per page

    Returns:
        Dictionary with limit and offset values
    """
    offset = (max(page, 1) - 1) * page_size
    return {
        'limit': page_size,
        'offset': offset
    }


def select_builder(
    table: str,
    columns: Optional[Sequence[str]] = None,
    predicates: Sequence[Predicate] = (),
    orders: Sequence[OrderTerm] = (),
    limit: Optional[int] = None,
    offset: Optional[int] = None
) -> Tuple[str, List[Any]]:
    """
    Build a SELECT statement.

    Args:
        table: Table name
        columns: Selected columns (defaults to '*')
        predicates: WHERE predicates
        orders: ORDER BY terms
        limit: LIMIT value, emitted only when greater than zero
        offset: OFFSET value, emitted only when greater than zero

    Returns:
        Tuple of (SQL, positional parameters)
    """
    where_clause, params = where_builder(predicates)

    parts = [
        f"SELECT {columns_builder(columns)} FROM {table}",
        where_clause,
        order_by_builder(orders),
        f"LIMIT {limit}" if limit and limit > 0 else "",
        f"OFFSET {offset}" if offset and offset > 0 else "",
    ]

    return " ".join(part for part in parts if part), params
