import sqlite3

import pytest

from db.database import (
    CURRENT_DB_VERSION, DB_FILE_NAME, get_config, get_value, initialize_database,
    open_database, set_config, set_values, table_columns,
)
from db.models import Config


def test_initialize_creates_file(tmp_path):
    data_dir = tmp_path / "app-data"
    db = initialize_database(str(data_dir))
    try:
        assert (data_dir / DB_FILE_NAME).exists()
    finally:
        db.close()


def test_migration_sets_version(db):
    assert db.execute("PRAGMA user_version").fetchone()[0] == CURRENT_DB_VERSION


def test_schema(db):
    assert [name for name, _ in table_columns(db, "kv_store")] == ["key", "value"]
    assert [name for name, _ in table_columns(db, "config_data")] == ["id", "view_mode", "sort_key"]


def test_reopen_does_not_rerun_migration(db, db_path):
    set_values(db, {"songs": "[]"})
    db.close()

    again = open_database(db_path)
    try:
        assert get_value(again, "songs") == "[]"
        assert again.execute("SELECT COUNT(*) FROM config_data").fetchone()[0] == 1
    finally:
        again.close()


def test_default_config(db):
    assert get_config(db) == Config(view_mode="list", sort_key="az")


def test_config_round_trip(db):
    set_config(db, Config(view_mode="grid", sort_key="za"))
    assert get_config(db) == Config(view_mode="grid", sort_key="za")


def test_invalid_config_values_fall_back(db):
    db.execute("UPDATE config_data SET view_mode = 'carousel', sort_key = 'random'")
    db.commit()
    assert get_config(db) == Config()


def test_kv_missing_key(db):
    assert get_value(db, "nothing") is None


def test_set_values_upserts(db):
    set_values(db, {"a": "1", "b": "2"})
    set_values(db, {"a": "3"})
    assert get_value(db, "a") == "3"
    assert get_value(db, "b") == "2"


def test_set_values_is_all_or_nothing(db):
    set_values(db, {"a": "1"})
    with pytest.raises(sqlite3.IntegrityError):
        set_values(db, {"a": "2", "b": None})
    assert get_value(db, "a") == "1"
    assert get_value(db, "b") is None
