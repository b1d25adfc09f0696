from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.remote_schema import TableIdentity


class SyncConfig(BaseModel):
    """Persisted connection configuration; owned by the host, only consumed here."""

    api_token: str = Field(default="", alias="apiToken")
    base_id: str = Field(default="", alias="baseId")
    table_id: str = Field(default="", alias="tableId")
    prevent_duplicates: bool = Field(default=False, alias="preventDuplicates")
    field_mappings: Dict[str, str] = Field(default_factory=dict, alias="fieldMappings")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def is_complete(self) -> bool:
        return bool(self.api_token and self.base_id and self.table_id)

    @property
    def identity(self) -> TableIdentity:
        return TableIdentity(base_id=self.base_id, table_id=self.table_id)


def load_sync_config(path: Optional[str] = None) -> SyncConfig:
    """Read the sync configuration from a JSON file, falling back to AIRTABLE_* env vars."""
    if path and Path(path).exists():
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return SyncConfig.model_validate(data)
    return SyncConfig(
        apiToken=os.getenv("AIRTABLE_API_TOKEN", ""),
        baseId=os.getenv("AIRTABLE_BASE_ID", ""),
        tableId=os.getenv("AIRTABLE_TABLE_ID", ""),
    )
