"""
===========================================
Data Manipulation Language (DML) Utilities.
===========================================

Pure functions rendering the INSERT, UPDATE and DELETE statements issued
by the fluent builder.

Placeholder conventions:
- INSERT and UPDATE use named placeholders keyed by column (``:name``)
- DELETE shares the positional ``?`` WHERE rendering of SELECT
- UPDATE identifies its row by a literal primary-key value

Functions:
- insert_builder: INSERT INTO ... VALUES (:col, ...)
- update_builder: UPDATE ... SET col = :col ... WHERE pk = <literal>
- delete_builder: DELETE FROM ... [WHERE ...]
- format_literal: Render a primary-key value as SQL text

Usage:
    from sql.dml import insert_builder, update_builder

    insert_builder('users', ['name', 'age'])
    # 'INSERT INTO users (name, age) VALUES (:name, :age)'

    update_builder('users', ['name'], 'id', 5)
    # 'UPDATE users SET name = :name WHERE id = 5'
"""

from typing import Any, List, Sequence, Tuple

from sql.clauses import Predicate
from sql.query_builder import where_builder


def format_literal(value: Any) -> str:
    """
    Render a value as an SQL literal.

    Integers are written bare. Everything else is single-quoted with quotes
    doubled; colons are escaped because statements are parsed by
    SQLAlchemy's ``text()``, which reads ``:word`` as a bind parameter.

    Args:
        value: Primary-key value

    Returns:
        SQL literal text
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)

    escaped = str(value).replace("'", "''").replace(":", "\\:")
    return f"'{escaped}'"


def insert_builder(table: str, columns: Sequence[str]) -> str:
    """
    Generate an INSERT statement with named placeholders.

    Args:
        table: Table name
        columns: Column names in payload order

    Returns:
        SQL INSERT statement

    Raises:
        ValueError: If no columns are given
    """
    if not columns:
        raise ValueError("Cannot build an INSERT without columns")

    column_list = ", ".join(columns)
    placeholder_list = ", ".join(f":{column}" for column in columns)

    return f"INSERT INTO {table} ({column_list}) VALUES ({placeholder_list})"


def update_builder(
    table: str,
    columns: Sequence[str],
    primary: str,
    primary_value: Any
) -> str:
    """
    Generate an UPDATE statement for a single row.

    Args:
        table: Table name
        columns: Changed columns, primary key excluded
        primary: Primary-key column name
        primary_value: Primary-key value of the row, rendered literally

    Returns:
        SQL UPDATE statement

    Raises:
        ValueError: If no columns are given
    """
    if not columns:
        raise ValueError("Cannot build an UPDATE without columns")

    set_clause = ", ".join(f"{column} = :{column}" for column in columns)

    return f"UPDATE {table} SET {set_clause} WHERE {primary} = {format_literal(primary_value)}"


def delete_builder(table: str, predicates: Sequence[Predicate] = ()) -> Tuple[str, List[Any]]:
    """
    Generate a DELETE statement.

    Args:
        table: Table name
        predicates: WHERE predicates, rendered like SELECT's

    Returns:
        Tuple of (SQL, positional parameters)
    """
    where_clause, params = where_builder(predicates)

    sql = f"DELETE FROM {table}"
    if where_clause:
        sql += f" {where_clause}"

    return sql, params
