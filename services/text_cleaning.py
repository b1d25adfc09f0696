from __future__ import annotations

import re
from typing import Any, List, Optional, Pattern, Tuple

from data_validator import EMPLOYMENT_TYPES

TEXT_MAX_LENGTH = 1000
FIELD_VALUE_MAX_LENGTH = 100000

Substitution = Tuple[Pattern[str], str]


def _subs(*pairs: Tuple[str, str]) -> List[Substitution]:
    return [(re.compile(pattern, re.IGNORECASE), repl) for pattern, repl in pairs]


# Ordered: later rules assume the earlier ones already removed their noise.
# Date ranges must come after employment types ("Full-time" carries a dash).
JOB_TITLE_RULES: List[Substitution] = _subs(
    (r"^at\s+", ""),
    (r"^company:\s*", ""),
    (rf"(?:\s*[·\-–]\s*({EMPLOYMENT_TYPES})\b.*|\s+({EMPLOYMENT_TYPES}))$", ""),
    (r"\s*•.*$", ""),
    (r"\s*\|.*$", ""),
    (r"\s*·.*$", ""),
    (r"\s*\(.*\)$", ""),
    (r"\s*\d+\s*yrs?\b.*$", ""),
    (r"\s*\d+\s*mos?\b.*$", ""),
    (r"\s*\d{4}\s*[-–].*$", ""),
)

# "link"/"page" suffixes are anchor-text artifacts of company links only;
# titles like "Head of Page" keep them.
COMPANY_NAME_RULES: List[Substitution] = (
    JOB_TITLE_RULES[:6]
    + _subs((r"\s*\([\d,]+\+?\s*employees?\)", ""))
    + JOB_TITLE_RULES[6:]
    + _subs((r"\s+(link|page)$", ""))
)

_WHITESPACE = re.compile(r"\s+")
_EDGE_DASHES = re.compile(r"^[\s-]+|[\s-]+$")
_WRAPPING_QUOTES = re.compile(r"^[\"']+|[\"']+$")


def clean_text(text: Optional[str], max_length: int = TEXT_MAX_LENGTH) -> str:
    """Collapse whitespace/newlines to single spaces, trim, cap length."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()[:max_length]


def apply_rules(text: str, rules: List[Substitution]) -> str:
    for pattern, repl in rules:
        text = pattern.sub(repl, text)
    text = _WHITESPACE.sub(" ", text)
    return _EDGE_DASHES.sub("", text).strip()


def clean_job_title(job_title: Optional[str]) -> str:
    """Strip prefixes, employment type, annotations and durations from a job title."""
    if not job_title:
        return ""
    return apply_rules(job_title, JOB_TITLE_RULES)


def clean_company_name(company: Optional[str]) -> str:
    if not company:
        return ""
    return apply_rules(company, COMPANY_NAME_RULES)


def strip_wrapping_quotes(text: str) -> str:
    return _WRAPPING_QUOTES.sub("", text).strip()


def sanitize_value(value: Any, max_length: int = FIELD_VALUE_MAX_LENGTH) -> Any:
    """Make a mapped value safe to send: trimmed, unquoted, no NUL bytes, bounded."""
    if value is None:
        return None
    if isinstance(value, str):
        sanitized = value.strip()
        sanitized = re.sub(r"^[\"']|[\"']$", "", sanitized)
        sanitized = sanitized.replace("\0", "")
        sanitized = _WHITESPACE.sub(" ", sanitized)
        return sanitized[:max_length]
    if isinstance(value, list):
        return [sanitize_value(item, max_length) for item in value]
    if isinstance(value, dict):
        return {key: sanitize_value(item, max_length) for key, item in value.items()}
    return value
