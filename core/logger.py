"""
====================================================
Centralized logging configuration for the query layer.
====================================================

Provides consistent logging setup across all modules with:
- Console output with optional ANSI colors
- File handlers attached per logger (used by the warning/error sink)
- Module-specific loggers

Example:
    >>> from core.logger import get_logger, setup_logging
    >>>
    >>> # Setup logging at application start
    >>> setup_logging(log_level='DEBUG')
    >>>
    >>> # Get module logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Query executed")
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """Formatter adding ANSI colors to the level name for console output.

    Attributes:
        COLORS: Dict mapping log levels to ANSI color codes
    """

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Format log record with a colored level name.

        The record is copied so handlers sharing it (file, caplog) keep
        the plain level name.
        """
        record = logging.makeLogRecord(record.__dict__)
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        return super().format(record)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a logger instance for the specified module.

    Args:
        name: Logger name (typically __name__ of calling module)
        level: Optional logging level override (DEBUG/INFO/WARNING/ERROR/CRITICAL)

    Returns:
        Configured Logger instance
    """
    logger = logging.getLogger(name)

    if level:
        logger.setLevel(getattr(logging, level.upper()))

    return logger


def add_file_handler(
    logger: logging.Logger,
    log_path: Union[str, Path],
    level: int = logging.WARNING
) -> logging.FileHandler:
    """Attach a UTF-8 file handler to a logger.

    The parent directory is created when missing.

    Args:
        logger: Logger receiving the handler
        log_path: Full path of the log file
        level: Minimum level written to the file

    Returns:
        The attached FileHandler (callers keep it to detach it later)
    """
    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(file_handler)
    return file_handler


def setup_logging(
    log_level: str = 'INFO',
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    console_output: bool = True,
    use_colors: bool = True
) -> None:
    """Setup centralized logging configuration.

    Configures the root logger with console and/or file handlers.
    Should be called once at application startup.

    Args:
        log_level: Logging level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        log_file: Optional log file name receiving every record
        log_dir: Optional log directory path (defaults to 'logs/')
        console_output: If True, output to console (stdout)
        use_colors: If True, use colored output for console
    """
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)

        formatter_class = ColoredFormatter if use_colors else logging.Formatter
        console_handler.setFormatter(formatter_class(PLAIN_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_dir) if log_dir else Path('logs')
        add_file_handler(root_logger, log_path / log_file, level=level)


def _init_default_logging():
    """Initialize default console logging if nothing configured it yet."""
    if not logging.getLogger().handlers:
        from core.config import config

        setup_logging(
            log_level=config.logging.log_level,
            console_output=True,
            use_colors=sys.stdout.isatty()
        )


# Auto-initialize on import
_init_default_logging()
