"""Pytest configuration and shared fixtures for the SQLite tutorial tests."""

import pytest

from sqlite_tutorial.database import (
    DEFAULT_CONTACTS,
    create_contact_table,
    open_database,
)


@pytest.fixture
def db_path(tmp_path):
    """Path for a database file that does not exist yet."""
    return tmp_path / "SQLiteTutorial" / "part1.sqlite"


@pytest.fixture
def db(db_path):
    """An open tutorial database with no tables."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    database = open_database(db_path)
    yield database
    database.close()


@pytest.fixture
def contact_db(db):
    """An open tutorial database with an empty Contact table."""
    create_contact_table(db)
    return db


@pytest.fixture
def default_contacts():
    """The four contacts the tutorial inserts."""
    return list(DEFAULT_CONTACTS)


@pytest.fixture
def tutorial_env(monkeypatch, tmp_path, db_path):
    """Point the tutorial's configuration at a temporary directory."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("SQLITE_TUTORIAL_DB_PATH", str(db_path))
    monkeypatch.setenv("SQLITE_TUTORIAL_LOG_DIR", str(tmp_path / "logs"))
    return db_path
