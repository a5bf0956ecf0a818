"""
Selector fallback chains for LinkedIn people-search result cards.

Each field has an ordered tuple of rules, most specific selector first. A
later rule is a degraded-but-working fallback for when LinkedIn ships new
markup, so adding a selector for a redesign means prepending a rule here
rather than touching the extraction code.

The hashed class names (`_2ceb7329` etc.) come from the SDUI search page and
are the first thing to break; the semantic classes after them match the
older Ember markup.
"""

from dataclasses import dataclass
from typing import Callable

PROFILE_BASE_URL = "https://www.linkedin.com"

# Result cards. Matched with one querySelectorAll so document order is kept.
CONTAINER_SELECTORS = (
    '[role="listitem"]',
    'div[componentkey]',
    '.reusable-search__result-container',
    '.entity-result__item',
)

# Present once the people search has rendered.
RESULTS_CONTAINER_SELECTOR = (
    '[data-sdui-screen="com.linkedin.sdui.flagshipnav.search.SearchResultsPeople"]'
)

NEXT_PAGE_SELECTOR = 'button[aria-label="Next"]'

# Cards with less text than this are spacers, ads or skeleton placeholders.
MIN_CONTAINER_TEXT = 30

REDACTED_NAMES = {"linkedin member"}
BRAND_TOKEN = "LinkedIn"
LOCATION_DELIMITER = "·"


def is_valid_name(text: str) -> bool:
    """A usable name: not redacted and at least first + last token."""
    if not text:
        return False
    if text.strip().lower() in REDACTED_NAMES:
        return False
    return len(text.split()) >= 2


def is_valid_title(text: str) -> bool:
    return bool(text) and len(text) > 3 and BRAND_TOKEN not in text


def is_valid_location(text: str) -> bool:
    return bool(text) and len(text) > 2


def is_profile_href(href: str) -> bool:
    return bool(href) and "/in/" in href


def strip_location(text: str) -> str:
    """Drop the connection degree and anything after the first "·"."""
    return text.split(LOCATION_DELIMITER)[0].strip()


@dataclass(frozen=True)
class FieldRule:
    """One step of a fallback chain.

    Attributes:
        selector: CSS selector, evaluated relative to the result card
        validate: Accepts or rejects the transformed value
        transform: Applied to the raw text before validation
        attribute: Read this attribute instead of the element text
    """
    selector: str
    validate: Callable[[str], bool]
    transform: Callable[[str], str] = str.strip
    attribute: str | None = None


NAME_RULES = (
    FieldRule('p._2ceb7329.cd6eedcd', is_valid_name),
    FieldRule('.actor-name', is_valid_name),
    FieldRule('.search-result__title', is_valid_name),
    FieldRule('[data-anonymize="person-name"]', is_valid_name),
    FieldRule('.entity-result__title-text a span[aria-hidden="true"]', is_valid_name),
)

PROFILE_URL_RULES = (
    FieldRule('a[href*="/in/"]', is_profile_href, attribute="href"),
    FieldRule('.app-aware-link[href*="/in/"]', is_profile_href, attribute="href"),
)

TITLE_RULES = (
    FieldRule('p._2ceb7329._43f2c93f._1124dec7._7a9b875b._5d2d5346', is_valid_title),
    FieldRule('.entity-result__primary-subtitle', is_valid_title),
    FieldRule('.subline-level-1', is_valid_title),
)

LOCATION_RULES = (
    FieldRule(
        'p._2ceb7329._43f2c93f._1124dec7._7a9b875b._5d2d5346._0d9fc42b._279a25a5.a16db193',
        is_valid_location,
        transform=strip_location,
    ),
    FieldRule('.entity-result__tertiary-subtitle', is_valid_location, transform=strip_location),
    FieldRule('.subline-level-2', is_valid_location, transform=strip_location),
)

# Where contact-info overlays (Apollo and similar extensions, LinkedIn's own
# contact info modal) put emails and phone numbers on a profile.
CONTACT_SURFACE_SELECTORS = (
    '.apollo-email',
    '.apollo-phone',
    '[data-apollo]',
    '[data-testid="apollo-email"]',
    '[data-testid="apollo-phone"]',
    '.ci-email',
    '.ci-phone',
    '.contact-info',
    '.pv-contact-info',
)

# Login form fields; if any is on the page we are not signed in.
LOGIN_FORM_SELECTOR = (
    'input#username, input#password, '
    'input[name="session_key"], input[name="session_password"]'
)
