"""
Contact enrichment: visit each lead's profile and pick up email/phone.

Visits are strictly sequential on the session's single page. A failure on
one profile never costs the rest of the batch; the lead is kept as it was.
"""

import logging
from dataclasses import replace

from config import Settings, get_settings
from contact_extraction import extract_contact_info
from errors import classify_error
from models import NOT_AVAILABLE, RawLead

logger = logging.getLogger(__name__)

SCROLL_PROFILE_JS = "() => window.scrollBy(0, 300)"


def merge_contact(record: RawLead, email: str, phone: str) -> RawLead:
    """Fill in email/phone, overwriting only values that are still unset."""
    return replace(
        record,
        email=email if record.email == NOT_AVAILABLE else record.email,
        phone=phone if record.phone == NOT_AVAILABLE else record.phone,
    )


async def _return_to(page, origin_url: str, settings: Settings) -> None:
    """Go back to origin_url if a failed visit left the page elsewhere."""
    try:
        if page.url != origin_url:
            await page.go_back()
            await page.wait_for_timeout(settings.return_settle_ms)
    except Exception as e:
        logger.debug("[enrich] Could not return to results: %s", str(e)[:100])


async def enrich_record(page, record: RawLead, settings: Settings) -> RawLead:
    """Visit one profile and merge what it shows.

    Raises whatever the page raises; enrich() handles it.
    """
    await page.goto(
        record.profile_url,
        wait_until="domcontentloaded",
        timeout=settings.profile_timeout_ms,
    )
    # Give the profile (and any contact-info extension) time to populate
    await page.wait_for_timeout(settings.profile_settle_ms)

    await page.evaluate(SCROLL_PROFILE_JS)
    await page.wait_for_timeout(settings.profile_scroll_ms)

    contact = await extract_contact_info(page)
    enriched = merge_contact(record, contact.email, contact.phone)

    if contact.empty:
        logger.info("[enrich] No contact info found for %s", record.name)
    else:
        logger.info("[enrich] Found contact info for %s: %s | %s", record.name, contact.email, contact.phone)

    await page.go_back()
    await page.wait_for_timeout(settings.return_settle_ms)
    return enriched


async def enrich(page, records: list[RawLead], settings: Settings = None) -> list[RawLead]:
    """Enrich a page's worth of raw leads with contact details.

    Args:
        page: Playwright page currently showing the search results
        records: Raw leads in card order
        settings: Timings; defaults to the environment settings

    Returns:
        One record per input record, same order. Records without a profile
        URL, or whose visit failed, come back unchanged.
    """
    settings = settings or get_settings()
    enriched = []

    for record in records:
        if not record.has_profile_url():
            enriched.append(record)
            continue

        logger.info("[enrich] Enriching contact info for: %s", record.name)
        origin_url = page.url
        try:
            enriched.append(await enrich_record(page, record, settings))
        except Exception as e:
            logger.warning(
                "[enrich] Failed to enrich %s (%s): %s",
                record.name, classify_error(e), str(e)[:100],
            )
            enriched.append(record)
            await _return_to(page, origin_url, settings)

    return enriched
