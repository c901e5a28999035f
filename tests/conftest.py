"""
Pytest configuration and fixtures for cali tests.
"""

import pytest
from click.testing import CliRunner

from cali.database.connection import DatabaseManager
from cali.services.calendar_store import CalendarStore


@pytest.fixture
def db_path(tmp_path):
    """Path to a fresh, not yet created, calendar database."""
    return str(tmp_path / "calendar.db")


@pytest.fixture
def db_manager(db_path):
    manager = DatabaseManager(db_path)
    manager.init_database()
    yield manager
    manager.dispose()


@pytest.fixture
def store(db_manager):
    """Storage engine over an initialized, empty database."""
    return CalendarStore(db_manager)


@pytest.fixture
def runner(monkeypatch, tmp_path):
    """Click runner isolated from any real .env or CALI_* settings."""
    for var in ("CALI_DATABASE_PATH", "CALI_DEFAULT_CALENDAR", "CALI_TIMEZONE",
                "CALI_DEBUG", "CALI_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return CliRunner()
