"""Test configuration and fixtures.

Provides:
- A fresh sqlite database in a temporary directory
- A SongRepository on that database, seeded or empty
"""

import pytest

from db.database import open_database
from db.repository import SongRepository


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "db.sqlite3")


@pytest.fixture
def db(db_path):
    conn = open_database(db_path)
    yield conn
    conn.close()


@pytest.fixture
def repository(db):
    """Repository after first-run initialization (holds the three sample songs)."""
    repo = SongRepository(db)
    repo.initialize()
    return repo


@pytest.fixture
def empty_repository(repository):
    """Repository with the sample songs removed."""
    for song in repository.get_all():
        repository.delete(song.id)
    return repository
