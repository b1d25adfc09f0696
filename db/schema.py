from __future__ import annotations

import sqlite3


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create the schema-cache table (idempotent)."""
    cur = conn.cursor()

    # One row per "{baseId}:{tableId}"; payload is {fieldTypes, fieldDetails, timestamp}
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS schema_cache (\n"
            "  table_key TEXT PRIMARY KEY,\n"
            "  base_id TEXT NOT NULL,\n"
            "  table_id TEXT NOT NULL,\n"
            "  payload_json TEXT NOT NULL,\n"
            "  fetched_at REAL NOT NULL,\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_schema_cache_base ON schema_cache(base_id);")

    conn.commit()
