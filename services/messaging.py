"""
Action-based message boundary between the extractor and the synchronizer.

Every request is a dict with an ``action`` key; every response is a
``{success, ...}`` envelope.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from models.profile_record import ProfileRecord
from models.sync_config import SyncConfig
from pipelines.extraction_orchestrator import ExtractionOrchestrator, ExtractionStatus
from services.sync_service import AirtableSyncService

logger = logging.getLogger(__name__)

Message = Dict[str, Any]

UNKNOWN_ACTION = "Unknown action"
NO_PROFILE = "No profile data available"


class MessageRouter:
    def __init__(self, sync_service: AirtableSyncService, orchestrator: Optional[ExtractionOrchestrator] = None):
        self.sync_service = sync_service
        self.orchestrator = orchestrator
        self.handlers: Dict[str, Callable[[Message], Message]] = {
            "extractProfile": self._extract_profile,
            "getProfileData": self._profile_data,
            "saveToAirtable": self._save,
            "testAirtableConnection": self._test_connection,
            "testFieldMappings": self._test_field_mappings,
            "fetchAvailableFields": self._fetch_available_fields,
        }

    def handle(self, request: Message) -> Message:
        action = request.get("action") if isinstance(request, dict) else None
        handler = self.handlers.get(action)
        if handler is None:
            return {"success": False, "error": UNKNOWN_ACTION}
        try:
            return handler(request)
        except Exception as e:
            logger.exception("Action %s failed", action, extra={"step": action, "status": "error", "error": type(e).__name__})
            return {"success": False, "error": str(e)}

    @staticmethod
    def _config(request: Message) -> SyncConfig:
        return SyncConfig.model_validate(request.get("config") or {})

    @staticmethod
    def _record(request: Message) -> ProfileRecord:
        return ProfileRecord.model_validate(request.get("data") or {})

    def _extract_profile(self, request: Message) -> Message:
        if self.orchestrator is None:
            return {"success": False, "error": NO_PROFILE}
        outcome = self.orchestrator.extract_now()
        if outcome.status is not ExtractionStatus.SUCCESS:
            return {"success": False, "error": outcome.error or f"Extraction {outcome.status.value}"}
        return {"success": True, "data": outcome.record.to_message()}

    def _profile_data(self, request: Message) -> Message:
        record = self.orchestrator.last_record if self.orchestrator is not None else None
        if record is None:
            return {"success": False, "error": NO_PROFILE}
        return {"success": True, "data": record.to_message()}

    def _save(self, request: Message) -> Message:
        response = self.sync_service.save_record(self._record(request), self._config(request), request.get("fieldMappings"))
        return response.to_message()

    def _test_connection(self, request: Message) -> Message:
        return self.sync_service.test_connection(self._config(request)).to_message()

    def _test_field_mappings(self, request: Message) -> Message:
        response = self.sync_service.test_field_mappings(self._record(request), self._config(request), request.get("fieldMappings"))
        return response.to_message()

    def _fetch_available_fields(self, request: Message) -> Message:
        return self.sync_service.fetch_available_fields(self._config(request)).to_message()
