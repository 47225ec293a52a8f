import logging
import os
import sqlite3
from typing import Mapping, Optional

from db.models import Config
from db.schema import SCHEMA_V1_SQL

logger = logging.getLogger(__name__)

CURRENT_DB_VERSION = 1
DB_FILE_NAME = "db.sqlite3"


def initialize_database(app_data_dir: str) -> sqlite3.Connection:
    os.makedirs(app_data_dir, exist_ok=True)
    sqlite_path = os.path.join(app_data_dir, DB_FILE_NAME)
    logger.info("Database file path: %s", sqlite_path)
    return open_database(sqlite_path)


def open_database(sqlite_path: str) -> sqlite3.Connection:
    db = sqlite3.connect(sqlite_path)
    db.row_factory = sqlite3.Row

    existing_version = int(db.execute("PRAGMA user_version").fetchone()[0])
    upgrade_database_if_needed(db, existing_version)

    return db


def upgrade_database_if_needed(db: sqlite3.Connection, existing_version: int) -> None:
    logger.info("Existing database version: %d", existing_version)

    if existing_version >= CURRENT_DB_VERSION:
        return

    # v1
    if existing_version <= 0:
        logger.info("Migrate database version 1...")
        db.execute("PRAGMA journal_mode=WAL")
        db.execute("PRAGMA user_version=1")
        db.executescript(SCHEMA_V1_SQL)
        db.commit()


def table_columns(db: sqlite3.Connection, table: str) -> list[tuple[str, str]]:
    cur = db.execute(f"PRAGMA table_info({table})")
    return [(row[1], row[2]) for row in cur.fetchall()]


# -------------------------------
# CONFIG
# -------------------------------
def get_config(db: sqlite3.Connection) -> Config:
    row = db.execute("""
        SELECT view_mode, sort_key
        FROM config_data
        LIMIT 1
    """).fetchone()
    if row is None:
        return Config()
    return Config.from_row(row)


def set_config(db: sqlite3.Connection, config: Config) -> None:
    db.execute("""
        UPDATE config_data
        SET view_mode = ?,
            sort_key = ?
        WHERE 1
    """, (
        config.view_mode,
        config.sort_key,
    ))
    db.commit()


# -------------------------------
# KEY-VALUE STORE
# -------------------------------
def get_value(db: sqlite3.Connection, key: str) -> Optional[str]:
    row = db.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
    return row["value"] if row else None


def set_values(db: sqlite3.Connection, values: Mapping[str, str]) -> None:
    """
    Write several keys in one transaction: either all of them land or none.
    """
    with db:
        db.executemany(
            """
            INSERT INTO kv_store (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            list(values.items()),
        )

