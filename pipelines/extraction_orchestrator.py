"""
Drives extraction against a live, still-rendering profile page.

States: IDLE -> WAITING (poll for readiness) -> EXTRACTING -> back to IDLE,
with a single bounded re-entry into WAITING when the record comes out
without a name. All timing goes through the injected scheduler.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

from config.settings import Settings, get_settings
from data_extractor import LinkedInProfileExtractor, is_linkedin_profile_page, parse_document
from models.profile_record import ProfileRecord
from ports.notifier import NotifierPort
from ports.scheduler import SchedulerPort
from ports.source import DocumentSourcePort
from utils.rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)

INCOMPLETE_MESSAGE = "Could not extract profile name; page may not have finished loading"


class ExtractionState(str, Enum):
    IDLE = "idle"
    WAITING = "waiting"
    EXTRACTING = "extracting"


class ExtractionStatus(str, Enum):
    SUCCESS = "success"
    INCOMPLETE = "incomplete"
    ERROR = "error"
    # Trigger-level outcomes: no extraction ran.
    DROPPED = "dropped"
    DEFERRED = "deferred"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ExtractionOutcome:
    status: ExtractionStatus
    record: Optional[ProfileRecord] = None
    error: Optional[str] = None


class ExtractionOrchestrator:
    def __init__(
        self,
        source: DocumentSourcePort,
        scheduler: SchedulerPort,
        notifier: Optional[NotifierPort] = None,
        extractor: Optional[LinkedInProfileExtractor] = None,
        settings: Optional[Settings] = None,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.settings = settings or get_settings()
        self.source = source
        self.scheduler = scheduler
        self.notifier = notifier
        self.extractor = extractor or LinkedInProfileExtractor()
        self.now = now
        self.rate_limiter = SlidingWindowRateLimiter(
            self.settings.rate_limit_max_triggers,
            self.settings.rate_limit_window_seconds,
            clock=scheduler.monotonic,
        )
        self.state = ExtractionState.IDLE
        self.last_record: Optional[ProfileRecord] = None
        self._last_url: Optional[str] = None
        # Non-blocking acquire is the single-flight compare-and-set.
        self._in_flight = threading.Lock()

    # Triggers

    def start(self) -> None:
        """Schedule the initial-load trigger."""
        self._last_url = self.source.current_url()
        self.scheduler.call_later(self.settings.initial_delay_seconds, self.trigger)

    def on_navigation(self, url: str) -> None:
        """Schedule a trigger after the page URL changed to another profile."""
        if url == self._last_url:
            return
        self._last_url = url
        if is_linkedin_profile_page(url):
            logger.info("URL changed to %s, re-extracting", url, extra={"step": "navigation"})
            self.scheduler.call_later(self.settings.navigation_delay_seconds, self.trigger)

    def trigger(self) -> ExtractionOutcome:
        """Automatic trigger: gated by page type and rate limit; result is pushed to the notifier."""
        if not is_linkedin_profile_page(self.source.current_url()):
            return ExtractionOutcome(ExtractionStatus.SKIPPED)
        if not self.rate_limiter.can_proceed():
            wait = self.rate_limiter.wait_time()
            logger.info("Rate limit reached, deferring extraction by %.2fs", wait, extra={"step": "trigger", "status": "deferred"})
            self.scheduler.call_later(wait, self.trigger)
            return ExtractionOutcome(ExtractionStatus.DEFERRED)

        outcome = self.run()
        if outcome.status is ExtractionStatus.SUCCESS:
            self._notify({"action": "profileDataExtracted", "data": outcome.record.to_message()})
        elif outcome.status in (ExtractionStatus.INCOMPLETE, ExtractionStatus.ERROR):
            self._notify({"action": "profileExtractionError", "error": outcome.error})
        return outcome

    def extract_now(self) -> ExtractionOutcome:
        """Explicit request from the caller; answered directly, not pushed."""
        return self.run()

    # State machine

    def run(self) -> ExtractionOutcome:
        if not self._in_flight.acquire(blocking=False):
            logger.info("Extraction already in progress, dropping trigger", extra={"step": "trigger", "status": "dropped"})
            return ExtractionOutcome(ExtractionStatus.DROPPED)
        try:
            retries = 0
            while True:
                self.state = ExtractionState.WAITING
                self.wait_until_ready()
                self.state = ExtractionState.EXTRACTING
                record = self.extractor.extract(self.source.snapshot(), self.source.current_url(), self.now())
                if record.is_complete:
                    self.last_record = record
                    logger.info("Extracted profile %s", record.full_name, extra={"step": "extract", "status": "ok"})
                    return ExtractionOutcome(ExtractionStatus.SUCCESS, record=record)
                if retries >= self.settings.max_incomplete_retries:
                    logger.warning("Profile name still empty after %d retries", retries, extra={"step": "extract", "status": "incomplete"})
                    return ExtractionOutcome(ExtractionStatus.INCOMPLETE, error=INCOMPLETE_MESSAGE)
                retries += 1
                logger.info("Name not found, retrying extraction", extra={"step": "extract", "status": "retry"})
        except Exception as e:
            logger.exception("Error extracting profile data", extra={"step": "extract", "status": "error", "error": type(e).__name__})
            return ExtractionOutcome(ExtractionStatus.ERROR, error=str(e) or type(e).__name__)
        finally:
            self.state = ExtractionState.IDLE
            self._in_flight.release()

    def wait_until_ready(self) -> bool:
        """Poll until the primary name locator has text; False when attempts ran out."""
        for attempt in range(self.settings.max_poll_attempts):
            if self.extractor.read_full_name(parse_document(self.source.snapshot())):
                logger.debug("Profile content ready after %d poll(s)", attempt + 1, extra={"step": "wait"})
                return True
            self.scheduler.sleep(self.settings.poll_interval_seconds)
        logger.warning("Timeout waiting for profile content, extracting anyway", extra={"step": "wait", "status": "timeout"})
        return False

    def _notify(self, message: Dict[str, Any]) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier(message)
        except Exception as e:
            logger.warning("Notifier failed for %s: %s", message.get("action"), e, extra={"step": "notify", "status": "error"})
