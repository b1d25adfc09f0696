from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(str, Enum):
    CONFIG_INCOMPLETE = "config_incomplete"
    NETWORK_FAILURE = "network_failure"
    AUTH_FAILURE = "auth_failure"
    PERMISSION_FAILURE = "permission_failure"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    UNKNOWN_FIELD = "unknown_field"
    TYPE_MISMATCH = "type_mismatch"
    OPTION_CREATION_DENIED = "option_creation_permission_denied"
    INVALID_REQUEST = "invalid_request"
    MALFORMED_RESPONSE = "malformed_response"
    UNKNOWN = "unknown"


class ExcludedField(BaseModel):
    """Diagnostic for a field dropped before transmission; never sent remotely."""

    field: str
    reason: str
    expected_type: Optional[str] = Field(default=None, alias="expectedType")
    actual_value: Any = Field(default=None, alias="actualValue")

    model_config = ConfigDict(populate_by_name=True)


class FieldError(BaseModel):
    field: str
    error: str


class ErrorInfo(BaseModel):
    kind: ErrorKind = ErrorKind.UNKNOWN
    message: str
    unknown_fields: List[str] = Field(default_factory=list, alias="unknownFields")
    field_errors: List[FieldError] = Field(default_factory=list, alias="fieldErrors")

    model_config = ConfigDict(populate_by_name=True)


class ValidationOutcome(BaseModel):
    valid: Dict[str, Any] = Field(default_factory=dict)
    excluded: List[ExcludedField] = Field(default_factory=list)


class SyncResponse(BaseModel):
    """``{success, ...}`` envelope returned at the synchronizer boundary."""

    success: bool
    record_id: Optional[str] = Field(default=None, alias="recordId")
    message: Optional[str] = None
    error: Optional[str] = None
    excluded_fields: Optional[List[ExcludedField]] = Field(default=None, alias="excludedFields")
    unknown_fields: Optional[List[str]] = Field(default=None, alias="unknownFields")
    field_errors: Optional[List[FieldError]] = Field(default=None, alias="fieldErrors")
    fields: Optional[List[Dict[str, Any]]] = None
    field_types: Optional[Dict[str, Any]] = Field(default=None, alias="fieldTypes")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def failure(cls, info: ErrorInfo, *, with_fields: bool = True) -> "SyncResponse":
        if not with_fields:
            return cls(success=False, error=info.message)
        return cls(
            success=False,
            error=info.message,
            unknownFields=list(info.unknown_fields),
            fieldErrors=list(info.field_errors),
        )

    def to_message(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
