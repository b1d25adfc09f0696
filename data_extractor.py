import logging
from datetime import datetime, timezone
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from config.settings import get_settings
from data_validator import (
    is_valid_company_name,
    is_valid_company_name_relaxed,
    is_valid_job_title,
    is_valid_location,
)
from models.profile_record import ProfileRecord
from services.locator_cascade import LocatorCascade, find_first_node, node_text, select_first
from services.text_cleaning import clean_company_name, clean_job_title, clean_text

# Minimal readiness probe: the page is considered rendered once one of these has text.
READINESS_SELECTORS: List[str] = [
    'h1[data-generated-suggestion-target]',
    '.text-heading-xlarge',
    '.pv-text-details__left-panel h1',
    '.ph5 h1',
    'h1.break-words',
    'h1',
]

FULL_NAME_SELECTORS: List[str] = [
    # Most specific modern header selectors
    'h1.text-heading-xlarge.inline.t-24.v-align-middle.break-words',
    'h1.text-heading-xlarge.inline',
    'h1.text-heading-xlarge',
    'section[data-section="profileHeader"] h1',
    '.pv-text-details__left-panel h1.text-heading-xlarge',
    '.pv-text-details__left-panel h1',
    '.pv-top-card h1',
    '.pv-top-card--list h1',
    '.ph5 h1',
    'h1[data-generated-suggestion-target]',
    'h1[data-anonymize="person-name"]',
    'h1.break-words',
    '.text-heading-xlarge',
    # Very broad fallbacks
    'main h1:first-of-type',
    'article h1:first-of-type',
]

# Job title comes from the first Experience entry, not the headline under the name.
JOB_TITLE_SELECTORS: List[str] = [
    '[data-field="experience"] .pvs-list__paged-list-item:first-child .mr1.t-bold span[aria-hidden="true"]',
    '[data-field="experience"] .pvs-list__paged-list-item:first-child .t-bold span[aria-hidden="true"]',
    '[data-field="experience"] .pvs-list__paged-list-item:first-child .t-bold',
    'section[data-section="experience"] .pvs-list__paged-list-item:first-child .mr1.t-bold span[aria-hidden="true"]',
    'section[data-section="experience"] .pvs-list__paged-list-item:first-child .t-bold span[aria-hidden="true"]',
    'section[data-section="experience"] .pvs-list__paged-list-item:first-child .t-bold',
    'section[data-section="experience"] li:first-child .t-bold span[aria-hidden="true"]',
    'section[data-section="experience"] li:first-child .t-bold',
    '#experience ~ div li:first-child .t-bold span[aria-hidden="true"]',
    '#experience ~ div li:first-child .t-bold',
    '#experience + div li:first-child .t-bold span[aria-hidden="true"]',
    '#experience + div li:first-child .t-bold',
    '.experience-section .pvs-list__paged-list-item:first-child .mr1.t-bold span[aria-hidden="true"]',
    '.experience-section .pvs-list__paged-list-item:first-child .t-bold span[aria-hidden="true"]',
    '.experience-section .pvs-list__paged-list-item:first-child .t-bold',
    'section .pvs-list li:first-child .t-bold span[aria-hidden="true"]',
    'section .pvs-list li:first-child .t-bold',
    # Legacy layouts
    '.experience-section .pv-entity__summary-info:first-child h3 span[aria-hidden="true"]',
    '.experience-section .pv-entity__summary-info:first-child h3',
    '.pv-profile-section.experience .pv-profile-section__list-item:first-child h3',
    '.experience-section ul li:first-child h3',
    '[id*="experience"] li:first-child .t-bold span[aria-hidden="true"]',
    '[id*="experience"] li:first-child .t-bold',
]

EXPERIENCE_ENTRY_SELECTORS: List[str] = [
    '[data-field="experience"] .pvs-list__paged-list-item:first-child',
    'section[data-section="experience"] li:first-child',
    '#experience ~ div li:first-child',
    '#experience + div li:first-child',
    'section:has(#experience) li:first-child',
    'div:has(> div > span:has(> #experience)) ul li:first-child',
    '.experience-section li:first-child',
    'section .pvs-list li:first-child',
]

# Several roles at one company: the company name sits above the nested role list.
GROUPED_COMPANY_SELECTORS: List[str] = [
    '[data-field="experience"] .pvs-list__paged-list-item:first-child > div > div > div:first-child .t-14.t-normal span[aria-hidden="true"]',
    '[data-field="experience"] .pvs-list__paged-list-item:first-child > div .t-14.t-normal span[aria-hidden="true"]',
    '[data-field="experience"] .pvs-list__paged-list-item:first-child .t-14.t-normal:not(:has(.t-bold)) span[aria-hidden="true"]',
    'section[data-section="experience"] .pvs-list__paged-list-item:first-child > div .t-14.t-normal span[aria-hidden="true"]',
    'section[data-section="experience"] li:first-child > div > div:first-child .t-14.t-normal',
    '#experience ~ div li:first-child > div .t-14.t-normal span[aria-hidden="true"]',
    '#experience + div li:first-child > div .t-14.t-normal span[aria-hidden="true"]',
    'section .pvs-list li:first-child > div .t-14.t-normal span[aria-hidden="true"]',
    '.experience-section .pv-entity__company-summary-info .pv-entity__secondary-title',
    '.experience-section li:first-child > .pv-entity__company-summary-info h3 + span',
]

SINGLE_ROLE_COMPANY_SELECTORS: List[str] = [
    '[data-field="experience"] .pvs-list__paged-list-item:first-child .t-14.t-normal span[aria-hidden="true"]',
    '[data-field="experience"] .pvs-list__paged-list-item:first-child .t-14.t-normal.break-words span[aria-hidden="true"]',
    '[data-field="experience"] .pvs-list__paged-list-item:first-child .t-14.t-normal:not(.t-bold)',
    '[data-field="experience"] .pvs-list__paged-list-item:first-child .t-14:not(.t-bold) span',
    '[data-field="experience"] .pvs-list__paged-list-item:first-child span.t-14.t-normal',
    '[data-field="experience"] li:first-child .t-14.t-normal',
    '#experience ~ div li:first-child .t-14.t-normal span[aria-hidden="true"]',
    '#experience ~ div li:first-child .t-14.t-normal:not(.t-bold)',
    '#experience + div li:first-child .t-14.t-normal span[aria-hidden="true"]',
    '#experience + div li:first-child .t-14.t-normal:not(.t-bold)',
    'section[data-section="experience"] .pvs-list__paged-list-item:first-child .t-14.t-normal span[aria-hidden="true"]',
    'section[data-section="experience"] li:first-child .t-14.t-normal:not(.t-bold)',
    'section[data-section="experience"] li:first-child .t-14 span',
    '.experience-section .pvs-list__paged-list-item:first-child .t-14.t-normal span[aria-hidden="true"]',
    '.experience-section .pvs-list__paged-list-item:first-child .t-14.t-normal',
    '.experience-section .pvs-list__paged-list-item:first-child .pv-entity__secondary-title',
    'section .pvs-list li:first-child .t-14.t-normal span[aria-hidden="true"]',
    'section .pvs-list li:first-child .t-14.t-normal:not(.t-bold)',
    '.experience-section .pv-entity__summary-info:first-child .pv-entity__secondary-title',
    '.experience-section .pv-profile-section__list-item:first-child .pv-entity__secondary-title',
    '.pv-profile-section.experience .pv-profile-section__list-item:first-child .pv-entity__secondary-title',
    # Fallbacks from profile header
    '.pv-text-details__left-panel .pv-entity__secondary-title',
    '.pv-top-card .pv-entity__secondary-title',
    '.ph5 .pv-entity__secondary-title',
    '.pv-top-card--experience-list .pv-entity__secondary-title',
    '.experience-section .pv-entity__summary-info h3 + .pv-entity__secondary-title',
]

LOCATION_SELECTORS: List[str] = [
    '.pv-text-details__left-panel .text-body-small.inline.t-black--light.break-words',
    '.pv-text-details__left-panel .text-body-small:not([aria-label*="connection"])',
    '.pv-text-details__left-panel .text-body-small.inline:last-child',
    '.pv-top-card .text-body-small.inline.t-black--light:not(:first-child)',
    '.ph5 .text-body-small.inline.t-black--light',
    '.pv-top-card--list-bullet .text-body-small',
    '[data-generated-suggestion-target] ~ .text-body-small.inline.t-black--light',
]

PROFILE_PICTURE_SELECTORS: List[str] = [
    '.pv-top-card__photo img',
    '.presence-entity__image img',
    '.profile-photo-edit__preview img',
    '.pv-top-card--photo img',
]

FALLBACK_TEXT_SELECTOR = '.t-14, .t-normal, span[aria-hidden="true"]'
EMPHASIS_CLASS = "t-bold"

FULL_NAME = LocatorCascade("fullName", FULL_NAME_SELECTORS)
JOB_TITLE = LocatorCascade("jobTitle", JOB_TITLE_SELECTORS, is_valid_job_title)
GROUPED_COMPANY = LocatorCascade("company", GROUPED_COMPANY_SELECTORS, is_valid_company_name)
SINGLE_ROLE_COMPANY = LocatorCascade("company", SINGLE_ROLE_COMPANY_SELECTORS, is_valid_company_name)
LOCATION = LocatorCascade("location", LOCATION_SELECTORS, is_valid_location)


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def is_linkedin_profile_page(url: Optional[str]) -> bool:
    """Check if a URL points at a LinkedIn profile page."""
    if not url:
        return False
    settings = get_settings()
    return any(pattern in url.lower() for pattern in settings.profile_url_patterns)


class LinkedInProfileExtractor:
    """Extracts the canonical profile record from one HTML snapshot."""

    def __init__(self):
        self.extraction_stats = {
            'successful_extractions': 0,
            'incomplete_extractions': 0,
            'company_fallbacks_used': 0,
        }

    def read_full_name(self, soup: BeautifulSoup) -> str:
        """Readiness probe: text of the primary name element, if rendered."""
        return node_text(find_first_node(soup, READINESS_SELECTORS))

    def extract_full_name(self, soup: BeautifulSoup) -> str:
        name = FULL_NAME.extract(soup)
        logging.debug(f"Extracted name: {name!r}")
        return name

    def extract_job_title(self, soup: BeautifulSoup) -> str:
        """Extract job title from the most recent position in the Experience section."""
        match = JOB_TITLE.find(soup)
        if not match:
            logging.debug("No valid job title found in Experience section")
            return ""
        job_title = clean_job_title(match.text)
        logging.debug(f"Job title via {match.selector!r}: {match.text!r} -> {job_title!r}")
        return job_title

    def find_first_experience_entry(self, soup: BeautifulSoup) -> Optional[Tag]:
        entry = find_first_node(soup, EXPERIENCE_ENTRY_SELECTORS)
        if entry is not None:
            return entry

        # Try to find any section whose heading mentions Experience
        for section in soup.find_all("section"):
            heading = select_first(section, 'h2, h3, [id*="experience"]')
            if heading is not None and "experience" in heading.get_text().lower():
                entry = select_first(section, "li:first-child, ul > div:first-child")
                if entry is not None:
                    logging.debug("Found experience entry via text-based search")
                    return entry
        return None

    @staticmethod
    def is_grouped_experience(entry: Tag) -> bool:
        """A nested role list inside the entry means several roles at one company."""
        return select_first(entry, "ul.pvs-list") is not None

    def extract_company(self, soup: BeautifulSoup) -> str:
        """Extract company from the most recent position in the Experience section."""
        entry = self.find_first_experience_entry(soup)
        if entry is None:
            logging.debug("Could not locate any experience entries")
            return ""

        cascade = GROUPED_COMPANY if self.is_grouped_experience(entry) else SINGLE_ROLE_COMPANY
        match = cascade.find(soup)
        company = match.text if match else ""
        if not company:
            company = self.extract_company_fallback(entry)
            if company:
                self.extraction_stats['company_fallbacks_used'] += 1

        cleaned = clean_company_name(company)
        logging.debug(f"Company: {company!r} -> {cleaned!r}")
        return cleaned

    def extract_company_fallback(self, entry: Tag) -> str:
        """Scan plain text nodes of the experience entry, skipping emphasized (title) nodes."""
        for node in entry.select(FALLBACK_TEXT_SELECTOR):
            if self._is_emphasized(node, entry):
                continue
            text = node_text(node)
            if not text or len(text) < 2:
                continue
            if is_valid_company_name_relaxed(text):
                logging.debug(f"Fallback found company candidate: {text!r}")
                return text
        return ""

    @staticmethod
    def _is_emphasized(node: Tag, boundary: Tag) -> bool:
        current: Optional[Tag] = node
        while current is not None and current is not boundary:
            if EMPHASIS_CLASS in (current.get("class") or []):
                return True
            current = current.parent
        return False

    def extract_location(self, soup: BeautifulSoup) -> str:
        return LOCATION.extract(soup)

    def extract_profile_picture(self, soup: BeautifulSoup) -> str:
        node = find_first_node(soup, PROFILE_PICTURE_SELECTORS)
        if node is None:
            return ""
        return str(node.get("src") or "")

    def extract(self, html: str, url: str, scraped_at: Optional[datetime] = None) -> ProfileRecord:
        """Run every field extraction against one snapshot and build the record."""
        soup = parse_document(html)
        record = ProfileRecord(
            fullName=self.extract_full_name(soup),
            jobTitle=self.extract_job_title(soup),
            company=self.extract_company(soup),
            location=self.extract_location(soup),
            profileUrl=url or "",
            profilePicture=self.extract_profile_picture(soup),
            scrapedAt=scraped_at or datetime.now(timezone.utc),
        )
        record = self.clean_profile_data(record)
        if record.is_complete:
            self.extraction_stats['successful_extractions'] += 1
        else:
            self.extraction_stats['incomplete_extractions'] += 1
        return record

    @staticmethod
    def clean_profile_data(record: ProfileRecord) -> ProfileRecord:
        """Apply the generic text normalizer to every string field."""
        updates = {
            name: clean_text(value)
            for name, value in record.__dict__.items()
            if isinstance(value, str)
        }
        return record.model_copy(update=updates)

    def get_extraction_stats(self) -> dict:
        return self.extraction_stats.copy()
