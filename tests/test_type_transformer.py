from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from models.field_types import FieldType
from services.type_transformer import EXCLUDE, HANDLERS, transform, transform_fields


def test_every_field_type_has_a_handler():
    assert set(HANDLERS) == set(FieldType)


def test_multi_select_splits_comma_string():
    assert transform("Tags", "a, b, c", "multipleSelects") == ["a", "b", "c"]
    assert transform("Tags", ["x", 2], "multipleSelects") == ["x", "2"]


def test_single_select_takes_first_element():
    assert transform("Owner", ["x", "y"], "singleSelect") == "x"
    assert transform("Stage", ' "Lead" ', "singleSelect") == "Lead"


def test_linked_record_url_is_excluded_not_sanitized():
    assert transform("Related", "https://example.com/x", "multipleRecordLinks") is EXCLUDE
    assert transform("Related", ["http://a", "https://b"], "multipleRecordLinks") is EXCLUDE
    assert transform("Related", "", "multipleRecordLinks") is EXCLUDE
    assert transform("Related", [], "multipleRecordLinks") is EXCLUDE


def test_linked_record_ids():
    assert transform("Related", "rec1, rec2", "multipleRecordLinks") == ["rec1", "rec2"]
    assert transform("Related", "rec1", "multipleRecordLinks") == ["rec1"]
    assert transform("Related", ["recX", "rec2"], "multipleRecordLinks") == ["recX", "rec2"]


def test_linked_record_with_any_url_is_excluded():
    assert transform("Related", ["recA", "https://x.com/y"], "multipleRecordLinks") is EXCLUDE
    assert transform("Related", "recA, http://x.com/y", "multipleRecordLinks") is EXCLUDE


def test_attachment_shapes():
    assert transform("Photo", "https://img/x.png", "multipleAttachments") == [{"url": "https://img/x.png"}]
    mixed = ["https://a", {"url": "https://b", "filename": "b.png"}, 3, {"name": "no url"}]
    assert transform("Photo", mixed, "multipleAttachments") == [
        {"url": "https://a"},
        {"url": "https://b", "filename": "b.png"},
    ]
    assert transform("Photo", "not a url", "multipleAttachments") == []


@pytest.mark.parametrize("tag", ["number", "currency", "percent", "rating"])
def test_numeric_types(tag):
    assert transform("Score", "12.5 USD", tag) == 12.5
    assert transform("Score", 7, tag) == 7.0
    assert transform("Score", "abc", tag) is EXCLUDE
    assert transform("Score", True, tag) is EXCLUDE


def test_checkbox_lenient_truthiness():
    assert transform("Hot", True, "checkbox") is True
    assert transform("Hot", "TRUE", "checkbox") is True
    assert transform("Hot", "1", "checkbox") is True
    assert transform("Hot", "yes", "checkbox") is False
    assert transform("Hot", 0, "checkbox") is False


def test_dates_serialize_native_values():
    assert transform("Contact Date", date(2024, 1, 2), "date") == "2024-01-02"
    stamp = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert transform("Added", stamp, "dateTime") == "2024-01-02T03:04:05+00:00"
    assert transform("Contact Date", "2024-01-02", "date") == "2024-01-02"


def test_text_like_and_plain_types():
    assert transform("Name", "'Jane'", "singleLineText") == "Jane"
    assert transform("Notes", 42, "multilineText") == "42"
    assert transform("Email", "jane@example.com", "email") == "jane@example.com"
    assert transform("Phone", 4915112345, "phoneNumber") == "4915112345"


def test_unknown_remote_type_passes_through():
    value = {"anything": 1}
    assert transform("Formula", value, "formula") is value


def test_heuristic_when_schema_unknown():
    assert transform("Profile Picture", "https://x/y.jpg", None) == "https://x/y.jpg"
    assert transform("Tags", "a, b", None) == ["a", "b"]
    assert transform("Tag", "solo", None) == "solo"
    assert transform("Name", "Jane", None) == "Jane"


def test_transform_fields_drops_excluded_and_empty():
    fields = {"Name": "Jane", "Related": "https://x", "Empty": "", "Missing": None, "Extra": "kept"}
    types = {"Name": "singleLineText", "Related": "multipleRecordLinks", "Empty": "singleLineText"}
    assert transform_fields(fields, types) == {"Name": "Jane", "Extra": "kept"}
