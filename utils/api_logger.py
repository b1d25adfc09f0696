"""
JSONL trace of Airtable REST calls, one line per request.

Enabled with API_TRACE=true; lines go to API_LOG_PATH. Tracing never raises
into the caller: an unwritable log path just drops the line.
"""
from __future__ import annotations

import json
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional


@dataclass
class CallTrace:
    """Outcome of one traced call, filled in by the caller inside ``trace_call``."""

    http_status: Optional[int] = None
    status: str = "ok"
    error: Optional[str] = None
    extras: Optional[Dict[str, Any]] = None


def _trace_path() -> Optional[Path]:
    from config.settings import get_settings

    # Re-read env each call so API_TRACE can be flipped at runtime (and in tests)
    get_settings.cache_clear()
    settings = get_settings()
    return Path(settings.api_log_path) if settings.api_trace else None


def _append(path: Path, payload: Dict[str, Any]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")
    except OSError:
        return


def log_call(
    *,
    caller: str,
    method: str,
    operation: str,
    table_key: Optional[str] = None,
    http_status: Optional[int] = None,
    duration_ms: Optional[int] = None,
    status: str = "ok",
    error: Optional[str] = None,
    extras: Optional[Dict[str, Any]] = None,
) -> None:
    path = _trace_path()
    if path is None:
        return

    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "caller": caller,
        "method": method,
        "operation": operation,
        "table_key": table_key,
        "http_status": http_status,
        "duration_ms": duration_ms,
        "status": status,
        "error": error,
    }
    if os.getenv("RUN_ID"):
        payload["run_id"] = os.getenv("RUN_ID")
    if extras:
        payload["extras"] = extras
    _append(path, payload)


@contextmanager
def trace_call(*, caller: str, method: str, operation: str, table_key: Optional[str] = None) -> Iterator[CallTrace]:
    """Time the wrapped request and log it on exit, marking raised exceptions as errors."""
    trace = CallTrace()
    started = time.monotonic()
    try:
        yield trace
    except Exception as e:
        trace.status = "error"
        trace.error = trace.error or type(e).__name__
        raise
    finally:
        log_call(
            caller=caller,
            method=method,
            operation=operation,
            table_key=table_key,
            http_status=trace.http_status,
            duration_ms=int((time.monotonic() - started) * 1000),
            status=trace.status,
            error=trace.error,
            extras=trace.extras,
        )
