"""
==========================================
Log sink package for the query builder.
==========================================

Modules:
    error_handler: ErrorLogger, the warning/error file sink used by builders

Example:
    >>> from logs.error_handler import ErrorLogger
    >>> ErrorLogger().log_error("Statement failed")
"""

__version__ = "0.1.0"
__all__ = ['ErrorLogger']

from logs.error_handler import ErrorLogger
