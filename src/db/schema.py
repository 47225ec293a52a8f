from __future__ import annotations

# v1 schema: the key-value song store plus persisted UI preferences.
SCHEMA_V1_SQL = """
CREATE TABLE kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE config_data (
    id INTEGER PRIMARY KEY,
    view_mode TEXT DEFAULT 'list',
    sort_key TEXT DEFAULT 'az'
);

INSERT INTO config_data (view_mode, sort_key) VALUES ('list', 'az');
"""
