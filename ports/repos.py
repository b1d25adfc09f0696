from __future__ import annotations

from typing import Optional, Protocol

from models.remote_schema import RemoteSchema, TableIdentity


class SchemaStorePort(Protocol):
    """Durable copy of remote schemas, keyed by table identity."""

    def load(self, identity: TableIdentity) -> Optional[RemoteSchema]:
        ...

    def save(self, schema: RemoteSchema) -> None:
        ...
