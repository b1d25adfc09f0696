from __future__ import annotations

import json
import sqlite3
from typing import Optional

from models.remote_schema import RemoteSchema, TableIdentity


class SchemaCacheRepo:
    """Durable copies of remote table schemas (implements ``SchemaStorePort``)."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def save(self, schema: RemoteSchema) -> None:
        identity = schema.identity
        cur = self.conn.cursor()
        cur.execute(
            "INSERT INTO schema_cache (table_key, base_id, table_id, payload_json, fetched_at) VALUES (?, ?, ?, ?, ?) "
            "ON CONFLICT(table_key) DO UPDATE SET payload_json = excluded.payload_json, "
            "fetched_at = excluded.fetched_at, updated_at = datetime('now')",
            (identity.key, identity.base_id, identity.table_id, json.dumps(schema.to_storage(), ensure_ascii=False), schema.fetched_at),
        )
        self.conn.commit()

    def load(self, identity: TableIdentity) -> Optional[RemoteSchema]:
        cur = self.conn.cursor()
        cur.execute("SELECT payload_json FROM schema_cache WHERE table_key = ?", (identity.key,))
        row = cur.fetchone()
        if not row:
            return None
        try:
            payload = json.loads(row[0])
        except json.JSONDecodeError:
            return None
        return RemoteSchema.from_storage(identity, payload)

