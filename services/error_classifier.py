"""
Translate Airtable failures into one human-readable message plus the
field-level detail a caller needs to highlight the offending inputs.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

import requests

from models.sync_results import ErrorInfo, ErrorKind, FieldError

logger = logging.getLogger(__name__)

UNKNOWN_FIELD_ERROR = "Field does not exist in Airtable table"
NETWORK_ERROR_MESSAGE = "Network error. Please check your internet connection."

_QUOTED_NAME = re.compile(r'"([^"]+)"')
_FIELD_NAME = re.compile(r"field[s]?\s+[\"']?([^\"'\s,]+)[\"']?", re.IGNORECASE)

OPTION_PERMISSION_MESSAGE = (
    "Permission Error: Your Airtable API token doesn't have permission to create new select options. "
    "To fix this:\n\n"
    "1. Go to https://airtable.com/create/tokens\n"
    "2. Edit your token to add the \"schema.bases:write\" scope\n"
    "3. Or manually add the missing value to your Single Select field in Airtable\n\n"
    "Details: {details}"
)

STATUS_OVERRIDES: Dict[int, tuple] = {
    401: (ErrorKind.AUTH_FAILURE, "Invalid API token. Please check your Airtable configuration."),
    403: (ErrorKind.PERMISSION_FAILURE, "Permission denied. Check your API token permissions."),
    404: (ErrorKind.NOT_FOUND, "Base or table not found. Please verify your Base ID and Table ID."),
    429: (ErrorKind.RATE_LIMITED, "Rate limit exceeded. Please wait a moment before trying again."),
}
INVALID_FORMAT_MESSAGE = "Invalid data format. Check your field mappings and ensure field types match."
MALFORMED_RESPONSE_MESSAGE = "Unexpected response from Airtable (HTTP {status}). Please try again later."


class AirtableHTTPError(Exception):
    """Non-2xx response from the Airtable REST API."""

    def __init__(
        self,
        status_code: int,
        reason: str = "",
        body: Optional[Dict[str, Any]] = None,
        malformed_body: bool = False,
    ):
        super().__init__(f"HTTP {status_code}: {reason}" if reason else f"HTTP {status_code}")
        self.status_code = status_code
        self.reason = reason
        self.body = body if isinstance(body, dict) else {}
        self.malformed_body = malformed_body or (body is not None and not isinstance(body, dict))


def _field_name(message: str) -> Optional[str]:
    """Quoted names first so multi-word fields survive; bare ``field X`` as fallback."""
    match = _QUOTED_NAME.search(message) or _FIELD_NAME.search(message)
    return match.group(1) if match else None


def _type_hint(message: str) -> str:
    lowered = message.lower()
    if "record id" in lowered:
        return (
            " The field appears to be a Linked Record type, but a URL was provided."
            " Change the field type in Airtable to URL or Attachment."
        )
    if "array" in lowered:
        return " The field expects an array format. Check the field type in Airtable."
    return ""


def _classify_body(info: ErrorInfo, body: Dict[str, Any]) -> bool:
    """Fill ``info`` from a structured error body; return True when a type was recognized."""
    error = body.get("error")
    if not isinstance(error, dict):
        if isinstance(error, str) and error:
            info.message = body.get("message") or error
        elif body.get("message"):
            info.message = str(body["message"])
        return False

    error_type = error.get("type") or ""
    message = error.get("message") or ""

    if error_type == "UNKNOWN_FIELD_NAME":
        info.kind = ErrorKind.UNKNOWN_FIELD
        match = _QUOTED_NAME.search(message)
        if match:
            name = match.group(1)
            info.unknown_fields.append(name)
            info.field_errors.append(FieldError(field=name, error=UNKNOWN_FIELD_ERROR))
            info.message = f'Unknown field: "{name}". Please check your field mappings in the configuration section.'
        else:
            info.message = f"Unknown field error. {message}"
        return True

    if error_type == "INVALID_VALUE_FOR_COLUMN":
        info.kind = ErrorKind.TYPE_MISMATCH
        hint = _type_hint(message)
        name = _field_name(message)
        if name:
            info.field_errors.append(FieldError(field=name, error=f"Invalid data type for this field{hint}"))
            info.message = f'Invalid data type for field "{name}".{hint} Details: {message}'
        else:
            info.message = f"Invalid data type error. {message}"
        return True

    if error_type == "INVALID_MULTIPLE_CHOICE_OPTIONS":
        info.kind = ErrorKind.OPTION_CREATION_DENIED
        info.message = OPTION_PERMISSION_MESSAGE.format(details=message)
        return True

    if error_type in ("INVALID_REQUEST_UNKNOWN", "INVALID_REQUEST_BODY"):
        info.kind = ErrorKind.INVALID_REQUEST
        info.message = f"Invalid data format: {message or 'Please verify your data and field mappings'}"
        name = _field_name(message)
        if name:
            info.field_errors.append(FieldError(field=name, error=message))
        return True

    if error_type == "INVALID_PERMISSIONS":
        info.kind = ErrorKind.PERMISSION_FAILURE
        info.message = f"Permission denied: {message}. Check your API token permissions."
        return True

    if error_type == "NOT_FOUND":
        info.kind = ErrorKind.NOT_FOUND
        info.message = f"Resource not found: {message}. Please verify your Base ID and Table ID."
        return True

    if message:
        info.message = message
    return False


def classify_error(
    error: BaseException,
    response_body: Optional[Dict[str, Any]] = None,
    sent_fields: Optional[Dict[str, Any]] = None,
) -> ErrorInfo:
    """Classify a failed remote call into an ``ErrorInfo``."""
    info = ErrorInfo(message=str(error) or type(error).__name__)

    if isinstance(error, (requests.ConnectionError, requests.Timeout)):
        info.kind = ErrorKind.NETWORK_FAILURE
        info.message = NETWORK_ERROR_MESSAGE
        return info

    body = response_body
    if body is None and isinstance(error, AirtableHTTPError):
        body = error.body
    recognized = _classify_body(info, body) if isinstance(body, dict) else False
    if not recognized and getattr(error, "malformed_body", False):
        info.kind = ErrorKind.MALFORMED_RESPONSE
        info.message = MALFORMED_RESPONSE_MESSAGE.format(status=error.status_code)

    status = getattr(error, "status_code", None)
    if status in STATUS_OVERRIDES:
        info.kind, info.message = STATUS_OVERRIDES[status]
    elif status == 422 and not recognized:
        info.kind = ErrorKind.TYPE_MISMATCH
        info.message = INVALID_FORMAT_MESSAGE

    logger.error(
        "Airtable error: %s (sent fields: %s)",
        info.message,
        sorted((sent_fields or {}).keys()),
        extra={"step": "classify_error", "status": info.kind.value},
    )
    return info
