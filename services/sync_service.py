"""
Schema-aware synchronizer: turns a canonical profile record into an Airtable
record, reporting every field it had to leave out and why.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Mapping, Optional

import requests

from config.settings import Settings, get_settings
from models.profile_record import ProfileRecord
from models.remote_schema import RemoteSchema
from models.sync_config import SyncConfig
from models.sync_results import ErrorInfo, ErrorKind, SyncResponse
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import MapFields
from pipelines.sync_profile import prepare_fields
from ports.repos import SchemaStorePort
from services.airtable_client import AirtableClient
from services.error_classifier import NETWORK_ERROR_MESSAGE, AirtableHTTPError, classify_error
from services.schema_cache import SchemaCache, lookup_schema

logger = logging.getLogger(__name__)

SAVE_CONFIG_INCOMPLETE = "Airtable configuration is incomplete"
CONFIG_INCOMPLETE = "Please provide all required configuration fields"
SAVE_SUCCESS = "Contact saved successfully to Airtable"
CONNECTION_SUCCESS = "Airtable connection successful"
MAPPINGS_VALID = "Field mappings are valid"
SCHEMA_UNAVAILABLE = "Could not fetch table schema. Please check your configuration."


def success_message(excluded_count: int) -> str:
    if not excluded_count:
        return SAVE_SUCCESS
    plural = "s" if excluded_count > 1 else ""
    return f"{SAVE_SUCCESS} ({excluded_count} field{plural} excluded due to type mismatches)"


class AirtableSyncService:
    """Owns the current schema cache value and the Airtable clients built per config."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        store: Optional[SchemaStorePort] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings or get_settings()
        self.session = session
        self.store = store
        self.clock = clock
        self.cache = SchemaCache()

    def client_for(self, config: SyncConfig) -> AirtableClient:
        return AirtableClient(config, settings=self.settings, session=self.session)

    def get_schema(self, config: SyncConfig, client: Optional[AirtableClient] = None) -> Optional[RemoteSchema]:
        client = client or self.client_for(config)
        schema, self.cache = lookup_schema(
            self.cache,
            config.identity,
            fetch=lambda identity: client.fetch_schema(identity, fetched_at=self.clock()),
            now=self.clock(),
            store=self.store,
            ttl=self.settings.schema_cache_ttl_seconds,
        )
        return schema

    def save_record(
        self,
        record: ProfileRecord,
        config: SyncConfig,
        field_mappings: Optional[Mapping[str, str]] = None,
    ) -> SyncResponse:
        if not config.is_complete():
            return SyncResponse.failure(ErrorInfo(kind=ErrorKind.CONFIG_INCOMPLETE, message=SAVE_CONFIG_INCOMPLETE), with_fields=False)

        client = self.client_for(config)
        schema = self.get_schema(config, client)
        mappings = config.field_mappings if field_mappings is None else field_mappings
        ctx = prepare_fields(record, mappings, schema)
        valid = ctx.outcome.valid
        excluded = ctx.outcome.excluded
        logger.info(
            "Saving %d field(s), %d excluded", len(valid), len(excluded),
            extra={"step": "save_record", "status": "sending"},
        )

        try:
            body = client.create_record(valid)
        except (AirtableHTTPError, requests.RequestException) as e:
            info = classify_error(e, getattr(e, "body", None), valid)
            return SyncResponse.failure(info)

        return SyncResponse(
            success=True,
            recordId=body.get("id"),
            message=success_message(len(excluded)),
            excludedFields=excluded,
        )

    def test_connection(self, config: SyncConfig) -> SyncResponse:
        if not config.is_complete():
            return SyncResponse(success=False, error=CONFIG_INCOMPLETE)
        try:
            self.client_for(config).list_records(max_records=1)
        except AirtableHTTPError as e:
            if e.status_code == 401:
                message = "Invalid API token"
            elif e.status_code == 404:
                message = "Base or table not found"
            else:
                error = e.body.get("error")
                message = (error.get("message") if isinstance(error, dict) else None) or f"HTTP {e.status_code}"
            return SyncResponse(success=False, error=message)
        except (requests.ConnectionError, requests.Timeout):
            return SyncResponse(success=False, error=NETWORK_ERROR_MESSAGE)
        except requests.RequestException as e:
            return SyncResponse(success=False, error=str(e))
        return SyncResponse(success=True, message=CONNECTION_SUCCESS)

    def test_field_mappings(
        self,
        sample: ProfileRecord,
        config: SyncConfig,
        field_mappings: Optional[Mapping[str, str]] = None,
    ) -> SyncResponse:
        """Create a ``[TEST]``-prefixed record with the mappings, then delete it."""
        if not config.is_complete():
            return SyncResponse(success=False, error=CONFIG_INCOMPLETE)

        mappings = config.field_mappings if field_mappings is None else field_mappings
        ctx = Pipeline([MapFields(test_prefix=True)]).run(RunContext(record=sample, field_mappings=dict(mappings)))
        client = self.client_for(config)
        try:
            body = client.create_record(ctx.fields)
        except (AirtableHTTPError, requests.RequestException) as e:
            return SyncResponse.failure(classify_error(e, getattr(e, "body", None), ctx.fields))

        record_id = body.get("id")
        if record_id:
            try:
                client.delete_record(record_id)
            except (AirtableHTTPError, requests.RequestException) as e:
                logger.warning("Could not delete test record %s: %s", record_id, e, extra={"step": "test_mappings", "status": "cleanup_failed"})
        return SyncResponse(success=True, message=MAPPINGS_VALID)

    def fetch_available_fields(self, config: SyncConfig) -> SyncResponse:
        if not config.is_complete():
            return SyncResponse(success=False, error=CONFIG_INCOMPLETE)
        schema = self.get_schema(config)
        if schema is None:
            return SyncResponse(success=False, error=SCHEMA_UNAVAILABLE)
        return SyncResponse(
            success=True,
            fields=[{"name": name, "type": field_type} for name, field_type in schema.field_types.items()],
            fieldTypes=dict(schema.field_types),
        )
