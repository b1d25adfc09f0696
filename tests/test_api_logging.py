from __future__ import annotations

import json
import logging

import pytest

from utils.api_logger import log_call, trace_call
from utils.logging_setup import RunIdFilter, SafeExtraFormatter


@pytest.fixture
def trace_file(tmp_path, monkeypatch):
    log_file = tmp_path / "api_calls.jsonl"
    monkeypatch.setenv("API_TRACE", "true")
    monkeypatch.setenv("API_LOG_PATH", str(log_file))
    monkeypatch.setenv("RUN_ID", "test-run-123")
    return log_file


def _lines(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_api_trace_writes_jsonl(trace_file):
    log_call(
        caller="unit.test",
        method="POST",
        operation="create_record",
        table_key="appBase:tblContacts",
        http_status=422,
        duration_ms=42,
        status="error",
        extras={"fields": ["Name"]},
    )

    rec = _lines(trace_file)[-1]
    assert rec["caller"] == "unit.test"
    assert rec["operation"] == "create_record"
    assert rec["http_status"] == 422
    assert rec["run_id"] == "test-run-123"
    assert rec["extras"] == {"fields": ["Name"]}


def test_trace_call_marks_raised_errors(trace_file):
    with pytest.raises(TimeoutError):
        with trace_call(caller="unit.test", method="GET", operation="fetch_tables") as trace:
            trace.http_status = None
            raise TimeoutError("slow")

    with trace_call(caller="unit.test", method="GET", operation="list_records") as trace:
        trace.http_status = 200

    failed, ok = _lines(trace_file)
    assert (failed["status"], failed["error"]) == ("error", "TimeoutError")
    assert (ok["status"], ok["http_status"]) == ("ok", 200)
    assert ok["duration_ms"] >= 0


def test_formatter_fills_missing_extras(monkeypatch):
    monkeypatch.setenv("RUN_ID", "abc")
    formatter = SafeExtraFormatter(fmt="%(message)s step=%(step)s field=%(field)s run=%(run_id)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    record.field = "Name"
    assert RunIdFilter().filter(record)
    assert formatter.format(record) == "hello step=- field=Name run=abc"
