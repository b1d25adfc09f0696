"""
Time-bounded remote schema lookup.

``SchemaCache`` is an immutable value: a lookup returns the schema together
with the (possibly new) cache the caller should keep. Entries are replaced
whole, never edited in place.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple

from models.remote_schema import RemoteSchema, TableIdentity
from ports.repos import SchemaStorePort

logger = logging.getLogger(__name__)

SCHEMA_TTL_SECONDS = 300.0

Fetcher = Callable[[TableIdentity], Optional[RemoteSchema]]


@dataclass(frozen=True)
class SchemaCache:
    entries: Mapping[TableIdentity, RemoteSchema] = field(default_factory=lambda: MappingProxyType({}))

    def get(self, identity: TableIdentity) -> Optional[RemoteSchema]:
        return self.entries.get(identity)

    def with_entry(self, schema: RemoteSchema) -> "SchemaCache":
        entries = dict(self.entries)
        entries[schema.identity] = schema
        return SchemaCache(entries=MappingProxyType(entries))

    def __len__(self) -> int:
        return len(self.entries)


def _persist(store: Optional[SchemaStorePort], schema: RemoteSchema) -> None:
    if store is None:
        return
    try:
        store.save(schema)
    except Exception as e:
        logger.warning("Could not persist schema for %s: %s", schema.identity.key, e, extra={"step": "schema_cache", "status": "store_failed"})


def _load_durable(store: Optional[SchemaStorePort], identity: TableIdentity) -> Optional[RemoteSchema]:
    if store is None:
        return None
    try:
        return store.load(identity)
    except Exception as e:
        logger.warning("Could not load stored schema for %s: %s", identity.key, e, extra={"step": "schema_cache", "status": "store_failed"})
        return None


def lookup_schema(
    cache: SchemaCache,
    identity: TableIdentity,
    *,
    fetch: Fetcher,
    now: float,
    store: Optional[SchemaStorePort] = None,
    ttl: float = SCHEMA_TTL_SECONDS,
) -> Tuple[Optional[RemoteSchema], SchemaCache]:
    """Return ``(schema_or_None, cache)`` for ``identity``.

    Fresh in-memory entry -> no network. Otherwise fetch; on failure fall back to
    the stale in-memory entry, then the durable copy, then None ("schema unknown").
    """
    cached = cache.get(identity)
    if cached is not None and cached.age(now) < ttl:
        logger.debug("Using cached schema for %s (age %.0fs)", identity.key, cached.age(now), extra={"step": "schema_cache", "status": "hit"})
        return cached, cache

    fetched: Optional[RemoteSchema] = None
    try:
        fetched = fetch(identity)
    except Exception as e:
        logger.warning("Error fetching table schema for %s: %s", identity.key, e, extra={"step": "schema_cache", "status": "fetch_failed", "error": type(e).__name__})

    if fetched is not None:
        _persist(store, fetched)
        return fetched, cache.with_entry(fetched)

    if cached is not None:
        logger.info("Using expired cached schema for %s as fallback", identity.key, extra={"step": "schema_cache", "status": "stale"})
        return cached, cache

    stored = _load_durable(store, identity)
    if stored is not None:
        logger.info("Using stored schema for %s as fallback", identity.key, extra={"step": "schema_cache", "status": "durable"})
        return stored, cache.with_entry(stored)

    return None, cache
