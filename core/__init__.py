"""
===================================================
Core infrastructure package for the query layer.
===================================================

This package provides configuration management, logging setup and the
error taxonomy shared by every other package.

Modules:
    config: Configuration management from environment variables
    logger: Centralized logging configuration and utilities
    exceptions: Errors reported or raised by the query builder

Example:
    >>> from core.config import config
    >>> from core.logger import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info(f"Connecting to {config.db_host}")
"""

__version__ = "0.1.0"
__all__ = ['get_logger', 'setup_logging', 'add_file_handler', 'config', 'Config']

from core.config import Config, config
from core.logger import add_file_handler, get_logger, setup_logging
