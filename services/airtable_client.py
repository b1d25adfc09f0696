"""
Thin Airtable REST client: records and table metadata for one base/table.
"""
import logging
import time
from typing import Any, Dict, Optional, Tuple

import requests

from config.settings import Settings, get_settings
from models.remote_schema import RemoteSchema, TableIdentity
from models.sync_config import SyncConfig
from services.error_classifier import AirtableHTTPError
from utils.api_logger import trace_call


def decode_body(response: requests.Response) -> Tuple[Dict[str, Any], bool]:
    """Response JSON as a dict plus whether it was one; unparseable or non-object bodies decode to ``{}``."""
    try:
        data = response.json()
    except ValueError as e:
        logging.warning(f"Failed to parse response JSON: {e}")
        return {}, False
    if not isinstance(data, dict):
        logging.warning(f"Unexpected response body type: {type(data).__name__}")
        return {}, False
    return data, True


class AirtableClient:
    """Handles Airtable API calls for the table named by a ``SyncConfig``."""

    def __init__(self, config: SyncConfig, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.config = config
        self.session = session or requests.Session()
        self.api_calls_made = 0

    @property
    def identity(self) -> TableIdentity:
        return self.config.identity

    def _headers(self, json_body: bool = False) -> Dict[str, str]:
        headers = {'Authorization': f'Bearer {self.config.api_token}'}
        if json_body:
            headers['Content-Type'] = 'application/json'
        return headers

    def _table_url(self, record_id: Optional[str] = None) -> str:
        url = f"{self.settings.airtable_api_url}/{self.config.base_id}/{self.config.table_id}"
        return f"{url}/{record_id}" if record_id else url

    def _request(self, method: str, operation: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        """Send one request; non-2xx raises ``AirtableHTTPError`` carrying the parsed body."""
        with trace_call(caller="AirtableClient", method=method, operation=operation, table_key=self.identity.key) as trace:
            self.api_calls_made += 1
            response = self.session.request(method, url, timeout=self.settings.request_timeout_seconds, **kwargs)
            trace.http_status = response.status_code
            body, well_formed = decode_body(response)
            if not 200 <= response.status_code < 300:
                logging.error(f"Airtable {operation} failed with status {response.status_code}: {body}")
                raise AirtableHTTPError(
                    response.status_code,
                    getattr(response, "reason", "") or "",
                    body,
                    malformed_body=not well_formed,
                )
        return body

    def list_records(self, max_records: int = 1) -> Dict[str, Any]:
        return self._request('GET', 'list_records', self._table_url(), headers=self._headers(), params={'maxRecords': max_records})

    def create_record(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Create one record with ``typecast=true`` so Airtable coerces select options."""
        return self._request(
            'POST', 'create_record', self._table_url(),
            headers=self._headers(json_body=True), params={'typecast': 'true'}, json={'fields': fields},
        )

    def delete_record(self, record_id: str) -> Dict[str, Any]:
        return self._request('DELETE', 'delete_record', self._table_url(record_id), headers=self._headers())

    def fetch_tables(self) -> Dict[str, Any]:
        url = f"{self.settings.airtable_api_url}/meta/bases/{self.config.base_id}/tables"
        return self._request('GET', 'fetch_tables', url, headers=self._headers())

    def fetch_schema(self, identity: TableIdentity, fetched_at: Optional[float] = None) -> Optional[RemoteSchema]:
        """Live schema for ``identity``; None when the table is not in the base."""
        logging.info(f"Fetching Airtable schema for {identity.key}")
        data = self.fetch_tables()
        schema = RemoteSchema.from_tables_response(identity, data, fetched_at=time.time() if fetched_at is None else fetched_at)
        if schema is None:
            logging.warning(f"Table {identity.table_id} not found in schema response")
        else:
            logging.info(f"Available fields: {', '.join(schema.field_types)}")
        return schema

    def get_api_usage(self) -> Dict[str, int]:
        return {'api_calls_made': self.api_calls_made}
