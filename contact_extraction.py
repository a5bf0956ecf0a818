"""
Email and phone pattern matching for profile pages.

`find_contact_info` is pure text matching; `extract_contact_info` gathers the
text from a live page and hands it over.
"""

import re
from dataclasses import dataclass

from errors import EvaluationError
from extraction_rules import CONTACT_SURFACE_SELECTORS
from models import NOT_AVAILABLE

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_RE = re.compile(r"(?:\+\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")

MIN_PHONE_DIGITS = 10

# Addresses that belong to the site itself or to mailers, never to a lead.
EXCLUDED_EMAIL_MARKERS = ("linkedin.com", "no-reply", "noreply")

COLLECT_CONTACT_TEXT_JS = """
(selectors) => {
    const surfaces = [];
    for (const selector of selectors) {
        for (const el of document.querySelectorAll(selector)) {
            surfaces.push(el.textContent || el.innerText || '');
        }
    }
    const body = document.body ? (document.body.textContent || '') : '';
    return {surfaces: surfaces, body: body};
}
"""


@dataclass
class ContactInfo:
    email: str = NOT_AVAILABLE
    phone: str = NOT_AVAILABLE

    @property
    def complete(self) -> bool:
        return self.email != NOT_AVAILABLE and self.phone != NOT_AVAILABLE

    @property
    def empty(self) -> bool:
        return self.email == NOT_AVAILABLE and self.phone == NOT_AVAILABLE


def is_valid_email(email: str) -> bool:
    lowered = email.lower()
    return not any(marker in lowered for marker in EXCLUDED_EMAIL_MARKERS)


def is_valid_phone(phone: str) -> bool:
    return len(re.sub(r"\D", "", phone)) >= MIN_PHONE_DIGITS


def first_email(text: str) -> str | None:
    for match in EMAIL_RE.finditer(text or ""):
        if is_valid_email(match.group(0)):
            return match.group(0)
    return None


def first_phone(text: str) -> str | None:
    for match in PHONE_RE.finditer(text or ""):
        if is_valid_phone(match.group(0)):
            return match.group(0)
    return None


def _scan(text: str, info: ContactInfo) -> None:
    if info.email == NOT_AVAILABLE:
        info.email = first_email(text) or NOT_AVAILABLE
    if info.phone == NOT_AVAILABLE:
        info.phone = first_phone(text) or NOT_AVAILABLE


def find_contact_info(surface_texts: list[str], body_text: str = "") -> ContactInfo:
    """Find the first valid email and phone.

    Contact surfaces are scanned first, in order; the whole body text is only
    scanned for whatever is still missing after that.

    Args:
        surface_texts: Text of each contact-surface element, in selector order
        body_text: Full visible text of the page

    Returns:
        ContactInfo with NOT_AVAILABLE for anything not found
    """
    info = ContactInfo()
    for text in surface_texts or []:
        _scan(text, info)
        if info.complete:
            return info

    _scan(body_text, info)
    return info


async def extract_contact_info(page) -> ContactInfo:
    """Read contact details from the profile currently open in page.

    Raises:
        EvaluationError: The page could not be read. The enrichment step
            decides what to keep.
    """
    try:
        result = await page.evaluate(COLLECT_CONTACT_TEXT_JS, list(CONTACT_SURFACE_SELECTORS))
    except Exception as e:
        raise EvaluationError(f"Could not read profile contacts: {str(e)[:200]}") from e
    result = result or {}
    return find_contact_info(result.get("surfaces") or [], result.get("body") or "")
