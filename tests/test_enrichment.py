"""
Tests for profile-visit contact enrichment.
Run with: python -m pytest tests/test_enrichment.py -v
"""

import asyncio
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Settings
from enrichment import enrich, merge_contact
from fake_page import FakePage, profile_url
from models import NOT_AVAILABLE, RawLead

SEARCH_URL = "https://www.linkedin.com/search/results/people/?keywords=solar"
SETTINGS = Settings(profile_settle_ms=4, profile_scroll_ms=5, return_settle_ms=6)


def lead(slug, **fields):
    return RawLead(name=f"{slug.title()} Lead", profile_url=profile_url(slug), **fields)


class TestMergeContact:
    def test_fills_missing(self):
        merged = merge_contact(RawLead(name="Jane Doe"), "jane@acme.io", "(512) 555-0134")
        assert merged.email == "jane@acme.io"
        assert merged.phone == "(512) 555-0134"

    def test_keeps_existing_values(self):
        merged = merge_contact(RawLead(name="Jane Doe", email="jane@acme.io"), "other@acme.io", NOT_AVAILABLE)
        assert merged.email == "jane@acme.io"
        assert merged.phone == NOT_AVAILABLE


class TestEnrich:
    def test_contacts_merged_in_order(self):
        records = [lead("ana"), lead("bo")]
        page = FakePage(
            profiles={
                profile_url("ana"): {"surfaces": ["ana@acme.io"], "body": ""},
                profile_url("bo"): {"surfaces": [], "body": "Call 512-555-0134"},
            },
            url=SEARCH_URL,
        )
        enriched = asyncio.run(enrich(page, records, SETTINGS))

        assert [r.name for r in enriched] == ["Ana Lead", "Bo Lead"]
        assert enriched[0].email == "ana@acme.io"
        assert enriched[1].phone == "512-555-0134"
        assert page.visits == [profile_url("ana"), profile_url("bo")]

    def test_returns_to_results(self):
        page = FakePage(url=SEARCH_URL)
        asyncio.run(enrich(page, [lead("ana")], SETTINGS))
        assert page.url == SEARCH_URL

    def test_one_failure_does_not_cost_the_batch(self):
        records = [lead("ana"), lead("bo"), lead("cy")]
        page = FakePage(
            profiles={
                profile_url("ana"): {"surfaces": ["ana@acme.io"], "body": ""},
                profile_url("cy"): {"surfaces": ["cy@acme.io"], "body": ""},
            },
            failing_urls=[profile_url("bo")],
            url=SEARCH_URL,
        )
        enriched = asyncio.run(enrich(page, records, SETTINGS))

        assert len(enriched) == 3
        assert enriched[0].email == "ana@acme.io"
        assert enriched[1] == records[1]
        assert enriched[2].email == "cy@acme.io"
        assert page.url == SEARCH_URL

    def test_records_without_profile_passed_through(self):
        record = RawLead(name="Jane Doe")
        page = FakePage(url=SEARCH_URL)
        enriched = asyncio.run(enrich(page, [record], SETTINGS))
        assert enriched == [record]
        assert page.visits == []

    def test_profile_waits_applied(self):
        page = FakePage(url=SEARCH_URL)
        asyncio.run(enrich(page, [lead("ana")], SETTINGS))
        assert page.waits == [4, 5, 6]

    def test_closed_page_keeps_records(self):
        records = [lead("ana"), lead("bo")]
        page = FakePage(url=SEARCH_URL)
        page.closed = True
        assert asyncio.run(enrich(page, records, SETTINGS)) == records

    def test_empty_batch(self):
        assert asyncio.run(enrich(FakePage(url=SEARCH_URL), [], SETTINGS)) == []
