from __future__ import annotations

from models.remote_schema import RemoteSchema, TableIdentity
from services.schema_validator import LINKED_RECORD_REASON, UNKNOWN_FIELD_REASON, validate

IDENTITY = TableIdentity("appBase", "tblContacts")


def _schema(**types):
    return RemoteSchema(identity=IDENTITY, field_types=types, fetched_at=0.0)


def test_unknown_schema_accepts_everything_non_empty():
    outcome = validate({"Name": "Jane", "Blank": "", "Nothing": None, "Files": []}, None)
    assert outcome.valid == {"Name": "Jane"}
    assert outcome.excluded == []


def test_field_missing_from_schema_is_excluded():
    outcome = validate({"Name": "Jane", "Nickname": "JD"}, _schema(Name="singleLineText"))
    assert outcome.valid == {"Name": "Jane"}
    assert [(e.field, e.reason) for e in outcome.excluded] == [("Nickname", UNKNOWN_FIELD_REASON)]


def test_linked_record_rejects_urls_even_in_an_array():
    outcome = validate({"Company": ["https://acme.com"]}, _schema(Company="multipleRecordLinks"))
    assert outcome.valid == {}
    excluded = outcome.excluded[0]
    assert excluded.reason == LINKED_RECORD_REASON
    assert excluded.expected_type == "multipleRecordLinks"
    assert excluded.actual_value == ["https://acme.com"]


def test_shape_checks_per_type():
    schema = _schema(
        Score="number",
        Hot="checkbox",
        Tag="multipleSelects",
        Photo="multipleAttachments",
        Stage="singleSelect",
        Related="multipleRecordLinks",
    )
    outcome = validate(
        {
            "Score": "12",
            "Hot": True,
            "Tag": "lead",
            "Photo": [{"url": "https://x"}],
            "Stage": ["a"],
            "Related": ["rec1"],
        },
        schema,
    )
    assert outcome.valid == {"Hot": True, "Photo": [{"url": "https://x"}], "Related": ["rec1"]}
    reasons = {e.field: e.reason for e in outcome.excluded}
    assert reasons["Score"] == "Expected number, got string"
    assert reasons["Tag"] == "Expected array of strings for multi-select, got string"
    assert reasons["Stage"] == "Expected string for single select, got array"


def test_unrecognized_type_accepts_value():
    outcome = validate({"Calc": 3}, _schema(Calc="formula"))
    assert outcome.valid == {"Calc": 3}
