from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class TableIdentity:
    """(base, table) pair identifying one remote schema scope."""

    base_id: str
    table_id: str

    @property
    def key(self) -> str:
        return f"{self.base_id}:{self.table_id}"


class RemoteSchema(BaseModel):
    """Field name -> type tag map for one table, stamped with its fetch time.

    Instances are never mutated; a refresh replaces the whole object.
    """

    identity: TableIdentity
    field_types: Dict[str, str]
    field_details: Dict[str, Dict[str, Any]] = {}
    fetched_at: float

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def type_of(self, field_name: str) -> Optional[str]:
        return self.field_types.get(field_name)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self.field_types

    def age(self, now: float) -> float:
        return now - self.fetched_at

    def to_storage(self) -> Dict[str, Any]:
        return {
            "fieldTypes": dict(self.field_types),
            "fieldDetails": dict(self.field_details),
            "timestamp": self.fetched_at,
        }

    @classmethod
    def from_storage(cls, identity: TableIdentity, payload: Dict[str, Any]) -> Optional["RemoteSchema"]:
        field_types = payload.get("fieldTypes") if isinstance(payload, dict) else None
        if not isinstance(field_types, dict) or not field_types:
            return None
        return cls(
            identity=identity,
            field_types=field_types,
            field_details=payload.get("fieldDetails") or {},
            fetched_at=float(payload.get("timestamp") or 0),
        )

    @classmethod
    def from_tables_response(cls, identity: TableIdentity, data: Dict[str, Any], fetched_at: float) -> Optional["RemoteSchema"]:
        """Pick the table (by id or name) out of a ``meta/bases/{base}/tables`` body."""
        tables = data.get("tables") if isinstance(data, dict) else None
        for table in tables or []:
            if not isinstance(table, dict):
                continue
            if table.get("id") != identity.table_id and table.get("name") != identity.table_id:
                continue
            fields = table.get("fields") or []
            field_types: Dict[str, str] = {}
            field_details: Dict[str, Dict[str, Any]] = {}
            for field in fields:
                name = field.get("name")
                if not name:
                    continue
                field_types[name] = field.get("type")
                field_details[name] = {"type": field.get("type"), "options": field.get("options")}
            if not field_types:
                return None
            return cls(identity=identity, field_types=field_types, field_details=field_details, fetched_at=fetched_at)
        return None
