from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    airtable_api_url: str
    request_timeout_seconds: int

    log_level: str

    # Core/runtime
    db_path: str
    run_env: str
    sync_config_path: str

    # Schema cache
    schema_cache_ttl_seconds: float

    # Extraction timing
    initial_delay_seconds: float
    navigation_delay_seconds: float
    poll_interval_seconds: float
    max_poll_attempts: int
    max_incomplete_retries: int

    # Trigger rate limit (sliding window)
    rate_limit_max_triggers: int
    rate_limit_window_seconds: float

    # Profile page gate
    profile_url_patterns: tuple[str, ...] = ("linkedin.com/in/",)

    # Logging/tracing
    api_trace: bool = False
    api_log_path: str = "logs/api_calls.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    return Settings(
        airtable_api_url=os.getenv("AIRTABLE_API_URL", "https://api.airtable.com/v0").rstrip("/"),
        request_timeout_seconds=int(os.getenv("REQUEST_TIMEOUT", "30")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        db_path=os.getenv("DB_PATH", "sync_cache.db"),
        run_env=os.getenv("RUN_ENV", "local"),
        sync_config_path=os.getenv("SYNC_CONFIG_PATH", "sync_config.json"),
        schema_cache_ttl_seconds=float(os.getenv("SCHEMA_CACHE_TTL_SECONDS", "300")),
        initial_delay_seconds=float(os.getenv("INITIAL_DELAY_SECONDS", "1.0")),
        navigation_delay_seconds=float(os.getenv("NAVIGATION_DELAY_SECONDS", "1.5")),
        poll_interval_seconds=float(os.getenv("POLL_INTERVAL_SECONDS", "0.5")),
        max_poll_attempts=int(os.getenv("MAX_POLL_ATTEMPTS", "20")),
        max_incomplete_retries=int(os.getenv("MAX_INCOMPLETE_RETRIES", "1")),
        rate_limit_max_triggers=int(os.getenv("RATE_LIMIT_MAX_TRIGGERS", "3")),
        rate_limit_window_seconds=float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "5")),
        api_trace=_as_bool(os.getenv("API_TRACE", "false")),
        api_log_path=os.getenv("API_LOG_PATH", "logs/api_calls.jsonl"),
    )
