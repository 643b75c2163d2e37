"""
==========================
Utility Functions Package.
==========================

Reusable helpers for database connectivity and value handling.

Modules:
    database_utils: Connection provider, engine creation and health checks
    helpers: Blank-value rule, column clearing and loose comparison
"""

__version__ = "1.0.0"
__all__ = [
    'ConnectionProvider',
    'DatabaseConnectionError',
    'check_database_available',
    'create_sqlalchemy_engine',
    'get_connection_string',
    'verify_connection',
    'wait_for_database',
    'clear_values',
    'is_blank',
    'loosely_equal',
]

from .database_utils import (
    ConnectionProvider,
    DatabaseConnectionError,
    check_database_available,
    create_sqlalchemy_engine,
    get_connection_string,
    verify_connection,
    wait_for_database,
)
from .helpers import clear_values, is_blank, loosely_equal
