from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'services.mapping'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")
    os.environ.setdefault("API_TRACE", "false")


class FakeResponse:
    def __init__(self, status_code=200, body=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self._body = body

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    """Stands in for ``requests.Session``; routes by (method, url suffix/substring)."""

    def __init__(self):
        self.routes = []
        self.calls = []

    def add(self, method, url_part, response):
        self.routes.append((method, url_part, response))
        return self

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        for route_method, url_part, response in self.routes:
            if route_method == method and url_part in url:
                if isinstance(response, Exception):
                    raise response
                if callable(response):
                    return response(method, url, **kwargs)
                return response
        return FakeResponse(404, {"error": {"type": "NOT_FOUND", "message": "no route"}}, "Not Found")

    def calls_to(self, method, url_part=""):
        return [c for c in self.calls if c["method"] == method and url_part in c["url"]]


class FakeScheduler:
    """Deterministic clock: ``sleep`` advances time, ``call_later`` only queues."""

    def __init__(self, start=0.0):
        self.now = start
        self.sleeps = []
        self.scheduled = []
        self.on_sleep = None

    def monotonic(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds
        if self.on_sleep is not None:
            self.on_sleep()

    def call_later(self, delay, callback):
        self.scheduled.append((self.now + delay, callback))

    def run_due(self):
        """Advance to each queued callback in time order and run it."""
        results = []
        while self.scheduled:
            self.scheduled.sort(key=lambda item: item[0])
            when, callback = self.scheduled.pop(0)
            self.now = max(self.now, when)
            results.append(callback())
        return results


@pytest.fixture
def settings(monkeypatch, tmp_path):
    from config.settings import get_settings

    monkeypatch.setenv("API_TRACE", "false")
    get_settings.cache_clear()
    base = get_settings()
    yield dataclasses.replace(base, db_path=str(tmp_path / "cache.db"), api_log_path=str(tmp_path / "api.jsonl"))
    get_settings.cache_clear()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def fake_scheduler():
    return FakeScheduler()


@pytest.fixture
def sync_config():
    from models.sync_config import SyncConfig

    return SyncConfig(apiToken="pat123", baseId="appBase", tableId="tblContacts")


@pytest.fixture
def tables_body():
    return {
        "tables": [
            {
                "id": "tblContacts",
                "name": "Contacts",
                "fields": [
                    {"name": "Name", "type": "singleLineText"},
                    {"name": "Job Title", "type": "singleLineText"},
                    {"name": "Company", "type": "singleLineText"},
                    {"name": "Location", "type": "singleLineText"},
                    {"name": "LinkedIn URL", "type": "url"},
                    {"name": "Profile Picture", "type": "multipleAttachments"},
                    {"name": "Tag", "type": "multipleSelects", "options": {"choices": [{"name": "lead"}]}},
                ],
            }
        ]
    }
