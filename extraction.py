"""
Pull raw leads out of a rendered LinkedIn people-search page.

The page is asked for an HTML snapshot of every result card (one script
evaluation), and each snapshot is parsed on the Python side with
BeautifulSoup against the fallback chains in extraction_rules. Parsing is
kept separate from the page so it can be exercised against saved markup.
"""

import logging
import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from errors import classify_error
from extraction_rules import (
    CONTAINER_SELECTORS,
    LOCATION_RULES,
    MIN_CONTAINER_TEXT,
    NAME_RULES,
    NEXT_PAGE_SELECTOR,
    PROFILE_BASE_URL,
    PROFILE_URL_RULES,
    TITLE_RULES,
    FieldRule,
)
from models import NOT_AVAILABLE, RawLead

logger = logging.getLogger(__name__)

SNAPSHOT_CONTAINERS_JS = """
(selectors) => Array.from(document.querySelectorAll(selectors.join(',')))
    .map(el => el.outerHTML)
"""

CLICK_NEXT_PAGE_JS = """
(selector) => {
    const nextBtn = document.querySelector(selector);
    if (nextBtn && !nextBtn.disabled) {
        nextBtn.click();
        return true;
    }
    return false;
}
"""


def first_match(container, rules: tuple[FieldRule, ...]) -> str | None:
    """Walk a fallback chain and return the first value that validates.

    Only the first element matching each selector is considered, the same as
    querySelector in the page.
    """
    for rule in rules:
        element = container.select_one(rule.selector)
        if element is None:
            continue
        if rule.attribute:
            raw = element.get(rule.attribute) or ""
        else:
            raw = element.get_text()
        value = rule.transform(raw)
        if rule.validate(value):
            return value
    return None


def absolute_profile_url(href: str) -> str:
    """Drop tracking parameters and make a profile link absolute."""
    clean = href.split("?")[0].split("#")[0]
    if clean.startswith("http"):
        return clean
    return urljoin(PROFILE_BASE_URL, clean)


def split_title_company(title: str) -> tuple[str, str]:
    """Split "Engineer at Acme" into ("Engineer", "Acme")."""
    # Line breaks inside the headline must not hide the separator
    title = re.sub(r"\s+", " ", title)
    at_index = title.find(" at ")
    if at_index == -1:
        return title, NOT_AVAILABLE
    company = title[at_index + 4:].strip() or NOT_AVAILABLE
    return title[:at_index].strip(), company


def parse_container(html: str, fallback_location: str) -> RawLead | None:
    """Parse one result card snapshot.

    Returns:
        A RawLead, or None for noise cards and cards without a usable name.
    """
    soup = BeautifulSoup(html, "html.parser")
    container = soup.find(True)
    if container is None:
        return None

    if len(container.get_text()) < MIN_CONTAINER_TEXT:
        return None

    name = first_match(container, NAME_RULES)
    if name is None:
        return None

    href = first_match(container, PROFILE_URL_RULES)
    profile_url = absolute_profile_url(href) if href else NOT_AVAILABLE

    title = first_match(container, TITLE_RULES) or NOT_AVAILABLE
    company = NOT_AVAILABLE
    if title != NOT_AVAILABLE:
        title, company = split_title_company(title)

    location = first_match(container, LOCATION_RULES) or fallback_location or NOT_AVAILABLE

    return RawLead(
        name=name,
        title=title,
        company=company,
        location=location,
        profile_url=profile_url,
    )


def parse_containers(snapshots: list[str], fallback_location: str) -> list[RawLead]:
    """Parse card snapshots in document order, skipping any that fail."""
    leads = []
    for index, html in enumerate(snapshots):
        try:
            lead = parse_container(html, fallback_location)
        except Exception as e:
            logger.debug("[extract] Error processing container %d: %s", index, str(e)[:100])
            continue
        if lead is not None:
            leads.append(lead)
    return leads


async def extract_page(page, fallback_location: str) -> list[RawLead]:
    """Extract raw leads from the search results currently on the page.

    Args:
        page: Playwright page showing LinkedIn people-search results
        fallback_location: Used when a card has no readable location

    Returns:
        Raw leads in card order; empty if the snapshot could not be taken.
    """
    try:
        snapshots = await page.evaluate(SNAPSHOT_CONTAINERS_JS, list(CONTAINER_SELECTORS))
    except Exception as e:
        logger.warning("[extract] Snapshot failed (%s): %s", classify_error(e), str(e)[:100])
        return []

    snapshots = snapshots or []
    logger.debug("[extract] Found %d containers to process", len(snapshots))
    leads = parse_containers(snapshots, fallback_location)
    if not leads and snapshots:
        logger.info("[extract] %d containers but no usable leads; markup may have changed", len(snapshots))
    return leads


async def go_to_next_page(page) -> bool:
    """Click the enabled "Next" button if there is one.

    Returns:
        True if a click was issued. False when there is no further page or the
        click could not be made; neither is an error.
    """
    try:
        return bool(await page.evaluate(CLICK_NEXT_PAGE_JS, NEXT_PAGE_SELECTOR))
    except Exception as e:
        logger.debug("[extract] Pagination failed: %s", str(e)[:100])
        return False
