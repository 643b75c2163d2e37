"""
======================================
Warning and error sink for the builder.
======================================

Every condition the query builder reports (bad order direction, illegal
operator, missing fillables, driver failures, ...) goes through an
``ErrorLogger``. The sink writes WARNING and above to the log file
configured by ``PATH_LOG`` / ``LOG_FILE`` and always returns ``None`` so
callers can ``return errors.report(...)`` from a terminal method.

Classes:
    ErrorLogger: log_warning / log_error / report on the 'query_builder' logger

Example:
    >>> from logs.error_handler import ErrorLogger
    >>> from core.exceptions import NoInsertableColumns
    >>>
    >>> errors = ErrorLogger()
    >>> errors.log_warning("Order direction must be 'asc' or 'desc'.")
    >>> errors.report(NoInsertableColumns('users'))   # logged at ERROR, returns None
"""

import logging
import os
import threading
from pathlib import Path
from typing import Optional, Union

from core.config import config
from core.exceptions import QueryBuilderError
from core.logger import add_file_handler

SINK_LOGGER_NAME = 'query_builder'


class ErrorLogger:
    """Log sink for non-fatal builder conditions.

    The file handler is attached on first use. When the configured path
    changes (tests, reconfiguration) the old handler is closed and replaced.

    Attributes:
        log_path: Explicit log file path; None resolves config.logging.log_path per write
        file_output: If False, records only reach the logger's other handlers
        logger: The 'query_builder' logger records are written to
    """

    _handlers = {}
    _handlers_lock = threading.Lock()

    def __init__(
        self,
        log_path: Optional[Union[str, Path]] = None,
        file_output: bool = True,
        logger_name: str = SINK_LOGGER_NAME
    ):
        self.log_path = Path(log_path) if log_path else None
        self.file_output = file_output
        self.logger = logging.getLogger(logger_name)

    def _resolve_path(self) -> Path:
        return self.log_path or config.logging.log_path

    def _ensure_file_handler(self) -> None:
        """Attach (or re-point) the file handler of this logger."""
        if not self.file_output:
            return

        path = self._resolve_path()
        with self._handlers_lock:
            current = self._handlers.get(self.logger.name)
            if current is not None and current.baseFilename == os.path.abspath(path):
                return
            if current is not None:
                self.logger.removeHandler(current)
                current.close()
            self._handlers[self.logger.name] = add_file_handler(
                self.logger, path, level=logging.WARNING
            )

    def log_warning(self, message: str) -> None:
        """Write a warning record."""
        self._ensure_file_handler()
        self.logger.warning(message)

    def log_error(self, message: str) -> None:
        """Write an error record."""
        self._ensure_file_handler()
        self.logger.error(message)

    def report(self, error: QueryBuilderError) -> None:
        """
        Log a builder error at the severity declared by its class.

        Args:
            error: The condition to report

        Returns:
            None, always
        """
        message = f"{type(error).__name__}: {error}"
        if getattr(error, 'level', 'error') == 'warning':
            self.log_warning(message)
        else:
            self.log_error(message)
        return None
