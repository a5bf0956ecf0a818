"""
Text cleanup applied to raw leads before they leave the harvester.

Every function here is pure and idempotent: cleaning an already-clean value
returns it unchanged.
"""

import re

from models import NOT_AVAILABLE, Lead, RawLead

TITLE_COMPANY_SEPARATOR = " at "

# Values that mean "nothing extracted" in one form or another.
_PLACEHOLDERS = {"", "n/a", "not available", "linkedin member"}


def collapse_whitespace(value: str) -> str:
    return re.sub(r"\s+", " ", value or "").strip()


def _is_placeholder(value: str) -> bool:
    return collapse_whitespace(value).lower() in _PLACEHOLDERS


def clean_name(name: str) -> str:
    if _is_placeholder(name):
        return NOT_AVAILABLE
    return collapse_whitespace(name)


def clean_title(title: str) -> str:
    """Keep the role half of a residual "role at company" string."""
    if _is_placeholder(title):
        return NOT_AVAILABLE
    cleaned = collapse_whitespace(title)
    if TITLE_COMPANY_SEPARATOR in cleaned:
        left = cleaned.split(TITLE_COMPANY_SEPARATOR)[0].strip()
        return left or NOT_AVAILABLE
    return cleaned


def clean_company(company: str) -> str:
    """Keep the company half of a residual "role at company" string."""
    if _is_placeholder(company):
        return NOT_AVAILABLE
    cleaned = collapse_whitespace(company)
    if TITLE_COMPANY_SEPARATOR in cleaned:
        right = cleaned.split(TITLE_COMPANY_SEPARATOR)[1].strip()
        return right or NOT_AVAILABLE
    return cleaned


def clean_location(location: str) -> str:
    """Trim a location to at most "City, Region"."""
    if _is_placeholder(location):
        return NOT_AVAILABLE
    parts = [part.strip() for part in collapse_whitespace(location).split(",")]
    parts = [part for part in parts if part]
    if not parts:
        return NOT_AVAILABLE
    return ", ".join(parts[:2])


def clean_contact(contact: str) -> str:
    if _is_placeholder(contact):
        return NOT_AVAILABLE
    return collapse_whitespace(contact)


def clean_profile_url(url: str) -> str:
    if _is_placeholder(url):
        return NOT_AVAILABLE
    return collapse_whitespace(url)


def normalize_lead(raw) -> Lead:
    """Build a Lead from a RawLead (or an already normalized Lead)."""
    return Lead(
        name=clean_name(raw.name),
        title=clean_title(raw.title),
        company=clean_company(raw.company),
        location=clean_location(raw.location),
        profile_url=clean_profile_url(raw.profile_url),
        email=clean_contact(raw.email),
        phone=clean_contact(raw.phone),
    )


def normalize_leads(raws: list[RawLead]) -> list[Lead]:
    """Normalize a batch, dropping anything whose name cleans to the sentinel."""
    leads = [normalize_lead(raw) for raw in raws]
    return [lead for lead in leads if lead.name != NOT_AVAILABLE]
