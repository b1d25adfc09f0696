from __future__ import annotations

from enum import Enum
from typing import Optional


class FieldType(str, Enum):
    """Closed set of remote field-type tags understood by the synchronizer."""

    TEXT = "singleLineText"
    LONG_TEXT = "multilineText"
    RICH_TEXT = "richText"
    URL = "url"
    EMAIL = "email"
    PHONE = "phoneNumber"
    SINGLE_SELECT = "singleSelect"
    MULTI_SELECT = "multipleSelects"
    LINKED_RECORD = "multipleRecordLinks"
    ATTACHMENT = "multipleAttachments"
    NUMBER = "number"
    CURRENCY = "currency"
    PERCENT = "percent"
    RATING = "rating"
    CHECKBOX = "checkbox"
    DATE = "date"
    DATE_TIME = "dateTime"

    @classmethod
    def parse(cls, tag: Optional[str]) -> Optional["FieldType"]:
        """Return the enum member for a remote tag, or None for tags outside the set."""
        if not tag:
            return None
        try:
            return cls(tag)
        except ValueError:
            return None


TEXT_LIKE = frozenset({FieldType.TEXT, FieldType.LONG_TEXT, FieldType.RICH_TEXT})
NUMERIC = frozenset({FieldType.NUMBER, FieldType.CURRENCY, FieldType.PERCENT, FieldType.RATING})
STRING_VALUED = frozenset(
    TEXT_LIKE
    | {FieldType.SINGLE_SELECT, FieldType.URL, FieldType.EMAIL, FieldType.PHONE, FieldType.DATE, FieldType.DATE_TIME}
)
