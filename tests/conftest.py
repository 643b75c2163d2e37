"""
Shared pytest configuration and fixtures for all tests.

Key fixtures:
- isolated_log_dir: (autouse) points the warning/error log sink at tmp_path
- error_sink: ErrorLogger writing to a temporary file
- sqlite_provider: ConnectionProvider over a shared in-memory SQLite database
- users_table: sqlite_provider with a seeded 'users' table
"""

import sys
from pathlib import Path

import pytest
from sqlalchemy import text
from sqlalchemy.pool import StaticPool

# Add project root to sys.path to enable importing project modules
# This allows tests to import from 'core', 'sql', 'builder', etc. without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests - isolated function-level tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interactions")
    config.addinivalue_line("markers", "smoke: Smoke tests - basic functionality checks")
    config.addinivalue_line("markers", "edge_case: Edge case tests - boundary conditions")


USERS_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT,
    age INTEGER,
    active BOOLEAN DEFAULT 1
)
"""

USERS_SEED = [
    {"name": "Ada", "age": 36, "active": True},
    {"name": "Grace", "age": 45, "active": True},
    {"name": "Linus", "age": 17, "active": False},
]


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path, monkeypatch):
    """Keep the default log sink out of the project tree."""
    from core.config import config

    monkeypatch.setattr(config.logging, "log_dir", tmp_path / "logs")
    return tmp_path / "logs"


@pytest.fixture
def error_sink(tmp_path):
    """ErrorLogger writing to a temporary file."""
    from logs.error_handler import ErrorLogger

    return ErrorLogger(log_path=tmp_path / "sink" / "errors.log")


@pytest.fixture
def sqlite_provider():
    """Connection provider over one shared in-memory SQLite connection."""
    from utils.database_utils import ConnectionProvider

    provider = ConnectionProvider(
        url="sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield provider
    provider.dispose()


@pytest.fixture
def users_table(sqlite_provider):
    """Create and seed the 'users' table; yields the provider."""
    with sqlite_provider.get_handle().begin() as conn:
        conn.execute(text(USERS_DDL))
        conn.execute(
            text("INSERT INTO users (name, age, active) VALUES (:name, :age, :active)"),
            USERS_SEED,
        )
    return sqlite_provider
