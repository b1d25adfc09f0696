from __future__ import annotations

import pytest
import requests

from models.sync_results import ErrorKind
from services.error_classifier import (
    INVALID_FORMAT_MESSAGE,
    MALFORMED_RESPONSE_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    UNKNOWN_FIELD_ERROR,
    AirtableHTTPError,
    classify_error,
)


def _http(status, error_type=None, message=""):
    body = {"error": {"type": error_type, "message": message}} if error_type else {}
    return AirtableHTTPError(status, "", body)


def test_unknown_field_name_is_extracted():
    info = classify_error(_http(422, "UNKNOWN_FIELD_NAME", 'Unknown field name: "Nickname"'), sent_fields={"Nickname": "JD"})
    assert info.kind is ErrorKind.UNKNOWN_FIELD
    assert info.unknown_fields == ["Nickname"]
    assert info.field_errors[0].field == "Nickname"
    assert info.field_errors[0].error == UNKNOWN_FIELD_ERROR
    assert '"Nickname"' in info.message


def test_invalid_value_hints_at_linked_record():
    message = 'Field "Company" cannot accept the provided value: value is not an array of record IDs.'
    info = classify_error(_http(422, "INVALID_VALUE_FOR_COLUMN", message))
    assert info.kind is ErrorKind.TYPE_MISMATCH
    assert info.field_errors[0].field == "Company"
    assert "Linked Record" in info.message


def test_multi_word_field_name_is_kept_whole():
    info = classify_error(_http(422, "INVALID_VALUE_FOR_COLUMN", 'Field "Job Title" cannot accept the provided value'))
    assert info.field_errors[0].field == "Job Title"
    assert '"Job Title"' in info.message

    info = classify_error(_http(422, "INVALID_REQUEST_BODY", 'Could not parse field "Lead Source"'))
    assert info.field_errors[0].field == "Lead Source"


def test_unquoted_field_name_still_extracted():
    info = classify_error(_http(422, "INVALID_VALUE_FOR_COLUMN", "Cannot parse value for field Score"))
    assert info.field_errors[0].field == "Score"


def test_option_creation_needs_schema_write_scope():
    info = classify_error(_http(422, "INVALID_MULTIPLE_CHOICE_OPTIONS", 'Insufficient permissions to create new select option ""vip""'))
    assert info.kind is ErrorKind.OPTION_CREATION_DENIED
    assert "schema.bases:write" in info.message


@pytest.mark.parametrize("status,kind", [
    (401, ErrorKind.AUTH_FAILURE),
    (403, ErrorKind.PERMISSION_FAILURE),
    (404, ErrorKind.NOT_FOUND),
    (429, ErrorKind.RATE_LIMITED),
])
def test_status_codes_override_body(status, kind):
    info = classify_error(_http(status, "UNKNOWN_FIELD_NAME", 'Unknown field name: "X"'))
    assert info.kind is kind


def test_unrecognized_422_is_invalid_format():
    info = classify_error(_http(422))
    assert info.kind is ErrorKind.TYPE_MISMATCH
    assert info.message == INVALID_FORMAT_MESSAGE


def test_recognized_422_keeps_specific_message():
    info = classify_error(_http(422, "INVALID_REQUEST_UNKNOWN", "Invalid request: parameter validation failed"))
    assert info.kind is ErrorKind.INVALID_REQUEST
    assert info.message.startswith("Invalid data format: Invalid request")


@pytest.mark.parametrize("error", [requests.ConnectionError("refused"), requests.Timeout("slow")])
def test_network_failures(error):
    info = classify_error(error)
    assert info.kind is ErrorKind.NETWORK_FAILURE
    assert info.message == NETWORK_ERROR_MESSAGE


def test_plain_error_string_body():
    info = classify_error(_http(500), response_body={"error": "SERVER_ERROR", "message": "Try again"})
    assert info.kind is ErrorKind.UNKNOWN
    assert info.message == "Try again"


def test_http_error_message_and_non_dict_body():
    error = AirtableHTTPError(500, "Server Error", ["not", "a", "dict"])
    assert str(error) == "HTTP 500: Server Error"
    assert error.body == {}
    assert str(AirtableHTTPError(502)) == "HTTP 502"


def test_non_json_error_body_is_malformed_response():
    info = classify_error(AirtableHTTPError(502, "Bad Gateway", None, malformed_body=True))
    assert info.kind is ErrorKind.MALFORMED_RESPONSE
    assert info.message == MALFORMED_RESPONSE_MESSAGE.format(status=502)


def test_status_override_beats_malformed_body():
    info = classify_error(AirtableHTTPError(429, "", None, malformed_body=True))
    assert info.kind is ErrorKind.RATE_LIMITED
    assert not AirtableHTTPError(500, "", {}).malformed_body
