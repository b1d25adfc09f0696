from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from models.field_types import NUMERIC, STRING_VALUED, FieldType
from models.remote_schema import RemoteSchema
from models.sync_results import ExcludedField, ValidationOutcome

logger = logging.getLogger(__name__)

UNKNOWN_FIELD_REASON = "Field does not exist in Airtable table"
LINKED_RECORD_REASON = "Linked record field requires array of record IDs, not URLs or text"

ShapeCheck = Callable[[Any], Optional[str]]


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == []


def check_linked_record(value: Any) -> Optional[str]:
    if not isinstance(value, list):
        return f"Expected array of record IDs for linked record field, got {_kind(value)}"
    if not all(isinstance(item, str) for item in value):
        return "All record IDs must be strings"
    return None


def check_attachment(value: Any) -> Optional[str]:
    if not isinstance(value, list):
        return f"Expected array of attachment objects, got {_kind(value)}"
    if not all(isinstance(item, dict) and isinstance(item.get("url"), str) for item in value):
        return "All attachments must be objects with url property"
    return None


def check_multi_select(value: Any) -> Optional[str]:
    if not isinstance(value, list):
        return f"Expected array of strings for multi-select, got {_kind(value)}"
    if not all(isinstance(item, str) for item in value):
        return "All multi-select options must be strings"
    return None


def check_single_select(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return f"Expected string for single select, got {_kind(value)}"
    return None


def check_number(value: Any) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value != value:
        return f"Expected number, got {_kind(value)}"
    return None


def check_checkbox(value: Any) -> Optional[str]:
    if not isinstance(value, bool):
        return f"Expected boolean, got {_kind(value)}"
    return None


def check_string(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return f"Expected string, got {_kind(value)}"
    return None


SHAPE_CHECKS: Dict[FieldType, ShapeCheck] = {
    FieldType.LINKED_RECORD: check_linked_record,
    FieldType.ATTACHMENT: check_attachment,
    FieldType.MULTI_SELECT: check_multi_select,
    FieldType.CHECKBOX: check_checkbox,
    **{member: check_number for member in NUMERIC},
    **{member: check_string for member in STRING_VALUED},
    FieldType.SINGLE_SELECT: check_single_select,
}


def is_valid_linked_record(value: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) > 0
        and all(isinstance(item, str) and not item.startswith("http") for item in value)
    )


def shape_error(value: Any, field_type: str) -> Optional[str]:
    """Reason the value does not fit the declared type, or None. Unknown tags always fit."""
    member = FieldType.parse(field_type)
    if member is None:
        return None
    return SHAPE_CHECKS[member](value)


def validate(fields: Dict[str, Any], schema: Optional[RemoteSchema]) -> ValidationOutcome:
    """Split transformed fields into those safe to send and those excluded, with reasons.

    A ``None`` schema means "unknown": every non-empty field passes.
    """
    outcome = ValidationOutcome()
    for name, value in fields.items():
        if _is_empty(value):
            logger.debug("Skipping empty field: %s", name, extra={"field": name})
            continue
        if schema is None:
            outcome.valid[name] = value
            continue

        field_type = schema.type_of(name)
        if not field_type:
            logger.warning("Field %s not found in table schema, excluding", name, extra={"field": name})
            outcome.excluded.append(ExcludedField(field=name, reason=UNKNOWN_FIELD_REASON, actualValue=value))
            continue

        if field_type == FieldType.LINKED_RECORD.value and not is_valid_linked_record(value):
            reason = LINKED_RECORD_REASON
        else:
            reason = shape_error(value, field_type)

        if reason:
            logger.warning("Field %s excluded: %s", name, reason, extra={"field": name})
            outcome.excluded.append(
                ExcludedField(field=name, reason=reason, expectedType=field_type, actualValue=value)
            )
            continue
        outcome.valid[name] = value
    return outcome
