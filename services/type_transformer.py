"""
Coerce mapped values into the shape each remote field type accepts.

Every ``FieldType`` member has exactly one handler in ``HANDLERS``; a handler
returns the coerced value or ``EXCLUDE`` to drop the field from the payload.
"""
from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from models.field_types import FieldType

logger = logging.getLogger(__name__)


class _Exclude:
    def __repr__(self) -> str:
        return "EXCLUDE"


EXCLUDE = _Exclude()

Handler = Callable[[str, Any], Any]

_WRAPPING_QUOTES = re.compile(r"^[\"']+|[\"']+$")
_LEADING_FLOAT = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _is_http(value: Any) -> bool:
    return isinstance(value, str) and value.startswith("http")


def _is_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _unquote(value: Any) -> str:
    return _WRAPPING_QUOTES.sub("", _as_text(value).strip()).strip()


def _split_csv(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_float(value: Any) -> Optional[float]:
    """Leading-number parse: '12.5 USD' -> 12.5, 'abc' -> None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    match = _LEADING_FLOAT.match(_as_text(value))
    if not match:
        return None
    return float(match.group(0))


def transform_attachment(name: str, value: Any) -> Any:
    if _is_http(value):
        return [{"url": value}]
    if isinstance(value, list):
        attachments = []
        for item in value:
            if _is_http(item):
                attachments.append({"url": item})
            elif isinstance(item, dict) and item.get("url"):
                attachments.append(item)
        return attachments
    logger.warning("Invalid attachment format for %s, returning empty array", name, extra={"field": name})
    return []


def transform_linked_record(name: str, value: Any) -> Any:
    if not value:
        logger.warning("Linked record field %s has no value; excluding", name, extra={"field": name})
        return EXCLUDE
    if isinstance(value, str):
        value = _split_csv(value) if "," in value else [value]
    if not isinstance(value, list):
        return EXCLUDE
    # Any URL excludes the whole field, never a partial id list
    if any(isinstance(item, str) and _is_url(item) for item in value):
        logger.warning("URLs cannot be used as record IDs for %s; excluding", name, extra={"field": name})
        return EXCLUDE
    ids = [item for item in value if isinstance(item, str) and item]
    return ids or EXCLUDE


def transform_multi_select(name: str, value: Any) -> Any:
    if isinstance(value, str):
        return _split_csv(value)
    if isinstance(value, list):
        return [_as_text(item) for item in value if _as_text(item)]
    return [_as_text(value)]


def transform_single_select(name: str, value: Any) -> Any:
    if isinstance(value, list):
        value = value[0] if value and value[0] else ""
    return _unquote(value)


def transform_text(name: str, value: Any) -> Any:
    return _unquote(value)


def transform_number(name: str, value: Any) -> Any:
    number = parse_float(value)
    return EXCLUDE if number is None else number


def transform_checkbox(name: str, value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() == "true" or value == "1"
    return bool(value)


def transform_date(name: str, value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return _as_text(value)


def transform_plain(name: str, value: Any) -> Any:
    return _as_text(value)


HANDLERS: Dict[FieldType, Handler] = {
    FieldType.ATTACHMENT: transform_attachment,
    FieldType.LINKED_RECORD: transform_linked_record,
    FieldType.MULTI_SELECT: transform_multi_select,
    FieldType.SINGLE_SELECT: transform_single_select,
    FieldType.TEXT: transform_text,
    FieldType.LONG_TEXT: transform_text,
    FieldType.RICH_TEXT: transform_text,
    FieldType.NUMBER: transform_number,
    FieldType.CURRENCY: transform_number,
    FieldType.PERCENT: transform_number,
    FieldType.RATING: transform_number,
    FieldType.CHECKBOX: transform_checkbox,
    FieldType.DATE: transform_date,
    FieldType.DATE_TIME: transform_date,
    FieldType.URL: transform_plain,
    FieldType.EMAIL: transform_plain,
    FieldType.PHONE: transform_plain,
}

_missing = set(FieldType) - set(HANDLERS)
if _missing:
    raise RuntimeError(f"No transform handler for field types: {sorted(t.value for t in _missing)}")


def transform_by_heuristic(name: str, value: Any) -> Any:
    """Best-effort shaping when the table schema is unknown."""
    lower = name.lower()
    if _is_http(value) and any(hint in lower for hint in ("picture", "photo", "image")):
        return str(value)
    if ("tag" in lower or "categor" in lower) and isinstance(value, str):
        items = _split_csv(value)
        if len(items) > 1:
            return items
        if len(items) == 1:
            return items[0]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def transform(name: str, value: Any, field_type: Optional[str]) -> Any:
    """Coerce one value for its declared remote type; unknown tags pass through."""
    if field_type is None:
        return transform_by_heuristic(name, value)
    member = FieldType.parse(field_type)
    if member is None:
        return value
    return HANDLERS[member](name, value)


def transform_fields(fields: Dict[str, Any], field_types: Optional[Dict[str, str]]) -> Dict[str, Any]:
    """Transform a whole mapped payload; excluded and empty values are dropped."""
    transformed: Dict[str, Any] = {}
    for name, value in fields.items():
        if value is None or value == "":
            continue
        # Fields missing from the schema get the heuristic; the validator reports them.
        field_type = field_types.get(name) if field_types else None
        result = transform(name, value, field_type)
        if result is EXCLUDE:
            logger.warning("Field %s excluded due to incompatible value type", name, extra={"field": name})
            continue
        transformed[name] = result
    return transformed
