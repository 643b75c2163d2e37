"""
Clause value types accumulated by the fluent builder and rendered by the
SQL assemblers.
"""

from dataclasses import dataclass
from typing import Any

CONNECTORS = ('AND', 'OR')
DIRECTIONS = ('asc', 'desc')


@dataclass(frozen=True)
class Predicate:
    """One WHERE condition, joined to the previous one by ``connector``."""

    column: str
    operator: str
    value: Any
    connector: str = 'AND'


@dataclass(frozen=True)
class OrderTerm:
    """One ORDER BY column with its lower-case direction."""

    column: str
    direction: str = 'asc'
