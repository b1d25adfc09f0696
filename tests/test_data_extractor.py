from __future__ import annotations

from datetime import datetime, timezone

import pytest

from data_extractor import (
    FULL_NAME_SELECTORS,
    JOB_TITLE_SELECTORS,
    LinkedInProfileExtractor,
    is_linkedin_profile_page,
    parse_document,
)
from profile_pages import (
    FALLBACK_COMPANY,
    GROUPED_ROLES,
    HEADING_ONLY_EXPERIENCE,
    JANE,
    JANE_URL,
    SINGLE_ROLE,
)

SCRAPED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def extractor():
    return LinkedInProfileExtractor()


def test_selector_catalogue_sizes():
    assert len(FULL_NAME_SELECTORS) == 15
    assert len(JOB_TITLE_SELECTORS) == 23


def test_extract_cleans_title_and_rejects_social_proof_location(extractor):
    record = extractor.extract(JANE, JANE_URL, SCRAPED_AT)
    assert record.full_name == "Jane Doe"
    assert record.job_title == "Product Manager"
    assert record.company == ""
    assert record.location == ""
    assert record.profile_url == JANE_URL
    assert record.profile_picture == "https://media.licdn.com/jane.jpg"
    assert record.scraped_at == SCRAPED_AT
    assert record.is_complete


def test_single_role_company_and_location(extractor):
    record = extractor.extract(SINGLE_ROLE, JANE_URL, SCRAPED_AT)
    assert record.full_name == "John Smith"
    assert record.job_title == "Senior Backend Engineer"
    assert record.company == "Acme Corp"
    assert record.location == "Berlin, Germany"


def test_grouped_roles_take_company_above_role_list(extractor):
    soup = parse_document(GROUPED_ROLES)
    entry = extractor.find_first_experience_entry(soup)
    assert extractor.is_grouped_experience(entry)
    assert extractor.extract_company(soup) == "Globex"
    assert extractor.extract_job_title(soup) == "Staff Engineer"


def test_company_fallback_skips_emphasized_and_employment_type(extractor):
    record = extractor.extract(FALLBACK_COMPANY, JANE_URL, SCRAPED_AT)
    assert record.job_title == "Designer"
    assert record.company == "Initech"
    assert extractor.get_extraction_stats()["company_fallbacks_used"] == 1


def test_experience_found_by_heading_text(extractor):
    soup = parse_document(HEADING_ONLY_EXPERIENCE)
    entry = extractor.find_first_experience_entry(soup)
    assert entry is not None and entry.name == "li"
    assert extractor.extract_company(soup) == "Umbrella Corp"


def test_missing_name_gives_incomplete_record(extractor):
    record = extractor.extract("<html><body><p>loading</p></body></html>", JANE_URL, SCRAPED_AT)
    assert record.full_name == ""
    assert not record.is_complete
    assert extractor.get_extraction_stats()["incomplete_extractions"] == 1


def test_read_full_name_is_lenient_readiness_probe(extractor):
    assert extractor.read_full_name(parse_document("<div><h1> Jane </h1></div>")) == "Jane"
    assert extractor.read_full_name(parse_document("<div></div>")) == ""


@pytest.mark.parametrize("url,expected", [
    ("https://www.linkedin.com/in/jane-doe/", True),
    ("https://LinkedIn.com/in/x", True),
    ("https://www.linkedin.com/company/acme", False),
    ("", False),
    (None, False),
])
def test_is_linkedin_profile_page(url, expected):
    assert is_linkedin_profile_page(url) is expected
