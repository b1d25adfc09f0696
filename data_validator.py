"""
Content validators for extracted profile fields.

Each field has an ordered table of (pattern, reason) rules. A candidate text is
rejected as soon as any rule matches; the tables are plain data so they can be
inspected and tested on their own.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, Pattern, Tuple

Rule = Tuple[Pattern[str], str]

logger = logging.getLogger(__name__)

JOB_TITLE_MAX_LENGTH = 200
COMPANY_NAME_MAX_LENGTH = 150
LOCATION_MAX_LENGTH = 200
JOB_TITLE_SCORE_THRESHOLD = 2

EMPLOYMENT_TYPES = r"Full-time|Part-time|Contract|Freelance|Internship|Self-employed"


def _rules(*pairs: Tuple[str, str]) -> List[Rule]:
    return [(re.compile(pattern, re.IGNORECASE), reason) for pattern, reason in pairs]


CONNECTION_DEGREE_RULES: List[Rule] = _rules(
    (r"\d+(st|nd|rd|th)\s*degree", "connection degree"),
    (r"\d+\s*connection", "connection count"),
    (r"mutual connection", "mutual connection"),
    (r"follow", "social-proof text"),
    (r"message", "social-proof text"),
    (r"connect", "social-proof text"),
)

UI_CHROME_RULES: List[Rule] = _rules(
    (r"^(Message|Connect|Follow|More|Experience|Show all|See less)$", "UI element"),
    (r"^(Edit|Delete|Add|Remove)$", "UI action"),
)

JOB_TITLE_DATE_RULES: List[Rule] = _rules(
    (r"^\d{4}\s*[-–]\s*(\d{4}|Present|Current)$", "year range"),
    (r"^(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{4}\s*[-–].*$", "month-year range"),
    (r"^\d+\s*yr(s)?\s*\d*\s*mo(s)?$", "duration"),
)

JOB_TITLE_RULES: List[Rule] = (
    JOB_TITLE_DATE_RULES
    + CONNECTION_DEGREE_RULES
    + UI_CHROME_RULES
    + _rules(
        (r"^\d+(st|nd|rd|th)\s*$", "bare degree marker"),
        (r"^[A-Z\s&,\.]+\s+(Inc\.|LLC|Ltd\.|Corp\.|Corporation|Company)$", "looks like a company name"),
    )
)

COMPANY_NAME_RULES: List[Rule] = (
    _rules(
        (rf"^({EMPLOYMENT_TYPES})$", "employment type"),
        (r"^·\s*(Full-time|Part-time|Contract|Freelance|Internship)$", "employment type"),
        (r"^\d{4}\s*[-–]\s*(\d{4}|Present|Current)$", "year range"),
        (r"^(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{4}", "month-year"),
        (r"^\d+\s*yr(s)?\s*\d*\s*mo(s)?$", "duration"),
        (r"^\d+\s*yr(s)?$", "duration"),
    )
    + UI_CHROME_RULES
    + _rules((r"^Company name$", "placeholder label"))
    + CONNECTION_DEGREE_RULES
)

# Scored, not rejecting: one match is tolerated ("... Engineering" companies).
JOB_TITLE_LIKE_PATTERNS: List[Pattern[str]] = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^(Senior|Junior|Lead|Principal|Chief|Head of|Director of|Manager of|Associate)",
        r"Engineer$",
        r"Developer$",
        r"Designer$",
        r"Analyst$",
        r"Consultant$",
        r"Specialist$",
    )
]

RELAXED_COMPANY_RULES: List[Rule] = _rules(
    (r"^(Full-time|Part-time|Contract|Freelance|Internship)$", "employment type"),
    (r"^\d{4}\s*[-–]\s*(\d{4}|Present)$", "year range"),
    (r"^\d+\s*yr(s)?\s*\d*\s*mo(s)?$", "duration"),
    (r"^(Message|Connect|Follow|More|Show all)$", "UI element"),
)

LOCATION_RULES: List[Rule] = CONNECTION_DEGREE_RULES + UI_CHROME_RULES


def first_rejection(text: str, rules: List[Rule]) -> Optional[str]:
    """Return the reason of the first matching rule, or None when no rule matches."""
    for pattern, reason in rules:
        if pattern.search(text):
            return reason
    return None


def _length_rejection(text: Optional[str], max_length: int) -> Optional[str]:
    if not text or len(text) < 2:
        return "too short"
    if len(text) > max_length:
        return "too long"
    return None


def job_title_score(text: str) -> int:
    return sum(1 for pattern in JOB_TITLE_LIKE_PATTERNS if pattern.search(text))


def job_title_rejection(text: Optional[str]) -> Optional[str]:
    return _length_rejection(text, JOB_TITLE_MAX_LENGTH) or first_rejection(text or "", JOB_TITLE_RULES)


def company_name_rejection(text: Optional[str]) -> Optional[str]:
    reason = _length_rejection(text, COMPANY_NAME_MAX_LENGTH) or first_rejection(text or "", COMPANY_NAME_RULES)
    if reason:
        return reason
    if job_title_score(text or "") >= JOB_TITLE_SCORE_THRESHOLD:
        return "strongly resembles a job title"
    return None


def is_valid_job_title(text: Optional[str]) -> bool:
    """Validate if extracted text is a job title from the Experience section."""
    reason = job_title_rejection(text)
    if reason:
        logger.debug("Rejected job title %r: %s", text, reason)
    return reason is None


def is_valid_company_name(text: Optional[str]) -> bool:
    """Strict organization-name check used by the locator cascade."""
    reason = company_name_rejection(text)
    if reason:
        logger.debug("Rejected company name %r: %s", text, reason)
    return reason is None


def is_valid_company_name_relaxed(text: Optional[str]) -> bool:
    """Relaxed check for the fallback scan; only rejects unambiguous non-company tokens."""
    if _length_rejection(text, COMPANY_NAME_MAX_LENGTH):
        return False
    return first_rejection(text or "", RELAXED_COMPANY_RULES) is None


def is_valid_location(text: Optional[str]) -> bool:
    reason = _length_rejection(text, LOCATION_MAX_LENGTH) or first_rejection(text or "", LOCATION_RULES)
    if reason:
        logger.debug("Rejected location %r: %s", text, reason)
    return reason is None


def is_non_empty(text: Optional[str]) -> bool:
    return bool(text and text.strip())


FIELD_VALIDATORS: Dict[str, Callable[[Optional[str]], bool]] = {
    "fullName": is_non_empty,
    "jobTitle": is_valid_job_title,
    "company": is_valid_company_name,
    "location": is_valid_location,
}
