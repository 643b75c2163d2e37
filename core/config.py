"""
=============================================
Configuration management for the query layer.
=============================================

Loads all configuration from environment variables (.env file) and provides
a centralized Config singleton for application-wide access.

The configuration system ensures:
- Single source of truth for connection and logging settings
- Type conversion of numeric settings
- A key/value lookup (``config.get``) for collaborators that only need
  one setting

Example:
    >>> from core.config import config
    >>>
    >>> # SQLAlchemy URL for the configured database
    >>> url = config.get_connection_url()
    >>>
    >>> # Access individual settings
    >>> print(f"Host: {config.db_host}, Port: {config.db_port}")
    >>> config.get('timezone')
    'UTC'
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


def _optional_int(value: Optional[str]) -> Optional[int]:
    """Convert an environment string to int, treating empty values as unset."""
    if value is None or value.strip() == '':
        return None
    return int(value)


@dataclass
class DatabaseConfig:
    """Database configuration settings.

    Attributes:
        driver: SQLAlchemy driver name (postgresql, postgresql+psycopg2, sqlite, ...)
        host: Database server hostname or IP address
        port: Database server port number
        user: Database username
        password: Database password
        database: Database name (file path for sqlite)
        charset: Client character set, passed to drivers that accept one
        timezone: Session timezone
        statement_timeout: Timeout in milliseconds (None disables it); a per-statement
            limit on PostgreSQL, the lock wait (busy timeout) on SQLite
    """

    driver: str
    host: str
    port: Optional[int]
    user: str
    password: str
    database: str
    charset: Optional[str] = None
    timezone: Optional[str] = None
    statement_timeout: Optional[int] = None

    @property
    def is_sqlite(self) -> bool:
        """True when the configured driver is SQLite."""
        return self.driver.split('+')[0] == 'sqlite'

    @property
    def is_postgresql(self) -> bool:
        """True when the configured driver is PostgreSQL."""
        return self.driver.split('+')[0] == 'postgresql'

    def get_connection_url(self) -> URL:
        """Get the SQLAlchemy URL for this database.

        Returns:
            SQLAlchemy URL object (passwords are escaped by URL itself)
        """
        if self.is_sqlite:
            return URL.create(drivername=self.driver, database=self.database or None)

        query = {}
        if self.charset and self.driver.split('+')[0] == 'mysql':
            query['charset'] = self.charset

        return URL.create(
            drivername=self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
            query=query
        )

    def get_connect_args(self) -> dict:
        """Get driver-level connect arguments for timezone and timeout.

        PostgreSQL receives ``statement_timeout``, which cancels statements
        running longer than the limit. SQLite has no such limit: the value
        becomes sqlite3's ``timeout``, how long a connection waits for a
        locked database before raising.

        Returns:
            Dictionary passed to ``create_engine(connect_args=...)``
        """
        if self.is_sqlite:
            if self.statement_timeout:
                # busy timeout, in seconds
                return {'timeout': self.statement_timeout / 1000}
            return {}

        if self.is_postgresql:
            options = []
            if self.statement_timeout:
                options.append(f'-c statement_timeout={self.statement_timeout}')
            if self.timezone:
                options.append(f'-c timezone={self.timezone}')
            return {'options': ' '.join(options)} if options else {}

        return {}


@dataclass
class LoggingConfig:
    """Logging configuration settings.

    Attributes:
        log_dir: Directory holding the warning/error log file
        log_file: Name of the warning/error log file
        log_level: Console log level used by setup_logging
    """

    log_dir: Path
    log_file: str
    log_level: str

    @property
    def log_path(self) -> Path:
        """Full path of the warning/error log file."""
        return self.log_dir / self.log_file


class Config:
    """Centralized configuration manager.

    Provides access to all configuration settings loaded from environment
    variables (.env file).

    Attributes:
        db: DatabaseConfig instance with database connection settings
        logging: LoggingConfig instance with log sink settings

    Example:
        >>> config = Config()
        >>> url = config.get_connection_url()
        >>> print(f"Connecting to {config.db_host}:{config.db_port}")
    """

    def __init__(self):
        """Initialize configuration from environment variables.

        Relative log directories are resolved against the project root.
        """
        self.db = DatabaseConfig(
            driver=os.getenv('DB_CONNECTION', 'postgresql'),
            host=os.getenv('DB_HOST', 'localhost'),
            port=_optional_int(os.getenv('DB_PORT', '5432')),
            user=os.getenv('DB_USERNAME', 'postgres'),
            password=os.getenv('DB_PASSWORD', ''),
            database=os.getenv('DB_DATABASE', 'postgres'),
            charset=os.getenv('DB_CHARSET', 'utf8'),
            timezone=os.getenv('DB_TIMEZONE', 'UTC'),
            statement_timeout=_optional_int(os.getenv('DB_STATEMENT_TIMEOUT'))
        )

        project_root = Path(__file__).parent.parent
        log_dir = Path(os.getenv('PATH_LOG', 'logs'))
        if not log_dir.is_absolute():
            log_dir = project_root / log_dir

        self.logging = LoggingConfig(
            log_dir=log_dir,
            log_file=os.getenv('LOG_FILE', 'query_builder.log'),
            log_level=os.getenv('LOG_LEVEL', 'INFO')
        )

    @property
    def db_host(self) -> str:
        """Get database server hostname."""
        return self.db.host

    @property
    def db_port(self) -> Optional[int]:
        """Get database server port number."""
        return self.db.port

    @property
    def db_user(self) -> str:
        """Get database username."""
        return self.db.user

    @property
    def db_password(self) -> str:
        """Get database password."""
        return self.db.password

    @property
    def db_name(self) -> str:
        """Get database name."""
        return self.db.database

    def get(self, key: str) -> Any:
        """Look up a single setting by name.

        Args:
            key: One of driver, host, port, user, password, database, charset,
                timezone, statement_timeout, log_dir, log_file, log_path, log_level

        Returns:
            The setting value, or None for unknown keys
        """
        if key in ('log_dir', 'log_file', 'log_level', 'log_path'):
            return getattr(self.logging, key)
        if key in DatabaseConfig.__dataclass_fields__:
            return getattr(self.db, key)
        return None

    def get_connection_url(self) -> URL:
        """Get the SQLAlchemy URL of the configured database."""
        return self.db.get_connection_url()


# Global configuration instance
config = Config()
