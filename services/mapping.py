from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Union

from models.profile_record import ProfileRecord
from services.text_cleaning import sanitize_value

logger = logging.getLogger(__name__)

DEFAULT_FIELD_MAPPINGS: Dict[str, str] = {
    'fullName': 'Name',
    'jobTitle': 'Job Title',
    'company': 'Company',
    'location': 'Location',
    'email': 'Email',
    'phone': 'Phone',
    'profileUrl': 'LinkedIn URL',
    'profilePicture': 'Profile Picture',
    'tags': 'Tag',
    'notes': 'Notes',
    'contactDate': 'Contact Date',
    'followUpDate': 'Follow Up On',
}

TEST_PREFIX = "[TEST] "


def merge_mappings(user_mapping: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """User overrides win over defaults; an empty override disables the key."""
    merged = dict(DEFAULT_FIELD_MAPPINGS)
    merged.update(user_mapping or {})
    return merged


def map_record(
    record: Union[ProfileRecord, Mapping[str, Any]],
    user_mapping: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Map a canonical record to ``{external field name: sanitized value}``.

    Keys with an empty value are omitted entirely so a save never clears a
    remote field.
    """
    data = record.canonical() if isinstance(record, ProfileRecord) else dict(record)
    fields: Dict[str, Any] = {}
    for key, external_name in merge_mappings(user_mapping).items():
        if not external_name:
            continue
        value = data.get(key)
        if value is None or value == "" or value == []:
            logger.debug("Skipping field %s - no data for %s", external_name, key, extra={"field": external_name})
            continue
        fields[external_name] = sanitize_value(value)
    return fields


def with_test_prefix(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Mark string values so a mapping test never looks like real data."""
    return {
        name: f"{TEST_PREFIX}{value}" if isinstance(value, str) else value
        for name, value in fields.items()
    }
