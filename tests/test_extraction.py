"""
Tests for result card parsing and the page-level extraction helpers.
Run with: python -m pytest tests/test_extraction.py -v
"""

import asyncio
import sys
from pathlib import Path

from bs4 import BeautifulSoup

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from extraction import (
    absolute_profile_url,
    extract_page,
    first_match,
    go_to_next_page,
    parse_container,
    parse_containers,
    split_title_company,
)
from extraction_rules import CONTAINER_SELECTORS, NAME_RULES, TITLE_RULES, is_valid_name, strip_location
from fake_page import FakePage, card
from models import NOT_AVAILABLE

FIXTURE = Path(__file__).parent / "fixtures" / "people_search_page.html"
SEARCH_URL = "https://www.linkedin.com/search/results/people/?keywords=solar"


def fixture_snapshots():
    """Card snapshots the way the page script returns them: outerHTML in document order."""
    soup = BeautifulSoup(FIXTURE.read_text(encoding="utf-8"), "html.parser")
    return [str(el) for el in soup.select(", ".join(CONTAINER_SELECTORS))]


class TestFieldRules:
    def test_redacted_name_rejected(self):
        assert not is_valid_name("LinkedIn Member")
        assert not is_valid_name("  linkedin member ")

    def test_single_token_name_rejected(self):
        assert not is_valid_name("Cher")
        assert is_valid_name("Mary Ann Smith")

    def test_strip_location_drops_degree(self):
        assert strip_location("Austin, Texas · 2nd") == "Austin, Texas"
        assert strip_location("Denver, CO") == "Denver, CO"

    def test_first_match_falls_through_invalid_values(self):
        """A selector that matches but fails validation must not stop the chain."""
        html = (
            '<li><span class="actor-name">LinkedIn Member</span>'
            '<span data-anonymize="person-name">Ana Lima</span></li>'
        )
        container = BeautifulSoup(html, "html.parser").find(True)
        assert first_match(container, NAME_RULES) == "Ana Lima"

    def test_first_match_none_when_nothing_validates(self):
        html = '<li><div class="entity-result__primary-subtitle">LinkedIn Top Voice</div></li>'
        container = BeautifulSoup(html, "html.parser").find(True)
        assert first_match(container, TITLE_RULES) is None


class TestHelpers:
    def test_profile_url_made_absolute_and_untracked(self):
        assert absolute_profile_url("/in/jane?trk=abc") == "https://www.linkedin.com/in/jane"
        assert absolute_profile_url("https://www.linkedin.com/in/jane#about") == "https://www.linkedin.com/in/jane"

    def test_split_title_company(self):
        assert split_title_company("Engineer at Acme Corp") == ("Engineer", "Acme Corp")

    def test_split_uses_first_separator(self):
        assert split_title_company("Head of Sales at Bolt at Night") == ("Head of Sales", "Bolt at Night")

    def test_split_without_company(self):
        assert split_title_company("Project Engineer") == ("Project Engineer", NOT_AVAILABLE)

    def test_split_with_empty_company(self):
        assert split_title_company("Founder at ") == ("Founder", NOT_AVAILABLE)

    def test_split_across_line_break(self):
        assert split_title_company("Senior Engineer\nat Acme Corp") == ("Senior Engineer", "Acme Corp")
        assert split_title_company("Senior  Engineer \n at  Acme Corp") == ("Senior Engineer", "Acme Corp")


class TestParseFixturePage:
    """Parse a saved people-search page mixing new and old markup."""

    def setup_method(self):
        self.leads = parse_containers(fixture_snapshots(), "Texas")

    def test_only_usable_cards_kept(self):
        names = [lead.name.split()[0] for lead in self.leads]
        assert names == ["Jane", "Priya", "John"]

    def test_redacted_and_single_name_cards_dropped(self):
        names = " ".join(lead.name for lead in self.leads)
        assert "LinkedIn Member" not in names
        assert "Cher" not in names

    def test_sdui_card_fields(self):
        jane = self.leads[0]
        assert jane.title == "Senior Solar Designer"
        assert jane.company == "SunPower"
        assert jane.location == "Austin, Texas, United States"
        assert jane.profile_url == "https://www.linkedin.com/in/jane-doe-123"

    def test_branded_title_rejected_and_location_falls_back(self):
        priya = self.leads[1]
        assert priya.title == NOT_AVAILABLE
        assert priya.company == NOT_AVAILABLE
        assert priya.location == "Texas"
        assert priya.profile_url == "https://www.linkedin.com/in/priya-patel"

    def test_ember_card_fields(self):
        john = self.leads[2]
        assert john.name == "John Smith"
        assert john.title == "Project Engineer"
        assert john.company == NOT_AVAILABLE
        assert john.location == "Denver, CO"
        assert john.profile_url == "https://www.linkedin.com/in/john-smith"

    def test_contact_fields_unset(self):
        for lead in self.leads:
            assert lead.email == NOT_AVAILABLE
            assert lead.phone == NOT_AVAILABLE


class TestParseContainer:
    def test_short_container_skipped(self):
        assert parse_container('<li role="listitem"><span class="actor-name">Al Bo</span></li>', "") is None

    def test_missing_location_without_fallback(self):
        lead = parse_container(card("Ana Lima", title="Installer", slug="ana-lima"), "")
        assert lead.location == NOT_AVAILABLE

    def test_wrapped_headline_keeps_company(self):
        lead = parse_container(card("Ana Lima", title="Senior Engineer\n          at Acme Corp", slug="ana-lima"), "")
        assert lead.title == "Senior Engineer"
        assert lead.company == "Acme Corp"

    def test_card_without_profile_link(self):
        lead = parse_container(card("Ana Lima", title="Installer"), "Ohio")
        assert lead.profile_url == NOT_AVAILABLE
        assert lead.location == "Ohio"

    def test_empty_snapshot_list(self):
        assert parse_containers([], "Ohio") == []

    def test_garbage_snapshot_skipped(self):
        leads = parse_containers(["", "<<<>>>", card("Ana Lima", slug="ana-lima")], "Ohio")
        assert [lead.name for lead in leads] == ["Ana Lima"]


class TestPageHelpers:
    def test_extract_page_reads_snapshots(self):
        page = FakePage(result_pages=[[card("Ana Lima", title="Installer at Sunrun", slug="ana-lima")]], url=SEARCH_URL)
        leads = asyncio.run(extract_page(page, "Ohio"))
        assert len(leads) == 1
        assert leads[0].company == "Sunrun"

    def test_extract_page_failure_returns_empty(self):
        page = FakePage(result_pages=[[card("Ana Lima", slug="ana-lima")]], url=SEARCH_URL)
        page.snapshot_error = RuntimeError("Execution context was destroyed")
        assert asyncio.run(extract_page(page, "Ohio")) == []

    def test_next_page_true_then_false(self):
        page = FakePage(result_pages=[[], []], url=SEARCH_URL)
        assert asyncio.run(go_to_next_page(page)) is True
        assert asyncio.run(go_to_next_page(page)) is False

    def test_next_page_on_closed_page_is_false(self):
        page = FakePage(result_pages=[[], []], url=SEARCH_URL)
        page.closed = True
        assert asyncio.run(go_to_next_page(page)) is False
