"""
The harvesting session: login hand-off, paginated harvest, stop.

One controller owns one Session and the browser that goes with it. The
harvest is a single sequence of awaits on one page; nothing here runs two
page operations at once.
"""

import logging
from typing import Callable, Optional
from urllib.parse import quote

from browser import BrowserHandle, launch_browser
from config import Settings, get_settings
from enrichment import enrich
from errors import (
    AlreadyRunning,
    InitializationError,
    NavigationError,
    NotAuthenticated,
    classify_error,
)
from extraction import extract_page, go_to_next_page
from extraction_rules import LOGIN_FORM_SELECTOR, RESULTS_CONTAINER_SELECTOR
from location_resolver import resolve
from models import NOT_AVAILABLE, FilterSpec, Lead, RawLead, Session, SessionStatus
from normalizer import normalize_leads
from progress import ProgressEvent, ProgressStatus

logger = logging.getLogger(__name__)

LANDING_URL = "https://www.linkedin.com"
SEARCH_URL = "https://www.linkedin.com/search/results/people/"

SCROLL_TO_BOTTOM_JS = "() => window.scrollTo(0, document.body.scrollHeight)"
HAS_LOGIN_FORM_JS = "(selector) => document.querySelector(selector) !== null"

Reporter = Callable[[ProgressEvent], None]


def build_search_url(filter_spec: FilterSpec) -> str:
    """People-search URL for a job title and a resolved geo code."""
    keyword = quote(filter_spec.job_title, safe="")
    geo_code = resolve(filter_spec.location)
    return f"{SEARCH_URL}?keywords={keyword}&origin=FACETED_SEARCH&geoUrn=%5B%22{geo_code}%22%5D"


class SessionController:
    """Drives the single harvesting session.

    Args:
        settings: Timings and limits; defaults to the environment settings
        launcher: Coroutine function returning a BrowserHandle. Camoufox by
            default; swapped out in tests.
    """

    def __init__(self, settings: Settings = None, launcher=launch_browser):
        self.settings = settings or get_settings()
        self._launcher = launcher
        self._handle: Optional[BrowserHandle] = None
        self.session = Session()

    @property
    def page(self):
        if self._handle is None or self._handle.closed:
            return None
        return self._handle.page

    def _renew_session_if_stopped(self) -> None:
        if self.session.is_stopped:
            self.session = Session()

    async def _ensure_browser(self):
        """Return the session page, launching the browser if it is gone.

        A relaunch starts from a fresh browser profile, so the login state
        seen afterwards may differ from before.
        """
        if self.page is None:
            try:
                self._handle = await self._launcher(self.settings)
            except InitializationError:
                raise
            except Exception as e:
                raise InitializationError(f"Could not start browser: {str(e)[:200]}") from e
        return self._handle.page

    async def begin_manual_auth(self) -> dict:
        """Open LinkedIn so the user can log in by hand.

        Returns immediately; the login itself happens in the browser window.

        Raises:
            AlreadyRunning: A harvest is using the page.
            InitializationError: The browser could not be started.
            NavigationError: LinkedIn could not be loaded.
        """
        if self.session.is_harvesting:
            raise AlreadyRunning("Harvest already in progress")
        self._renew_session_if_stopped()
        logger.info("[harvest] Manual login mode activated")

        page = await self._ensure_browser()
        try:
            await page.goto(LANDING_URL, wait_until="networkidle", timeout=self.settings.nav_timeout_ms)
        except Exception as e:
            raise NavigationError(f"Could not open {LANDING_URL}: {str(e)[:200]}") from e

        if self.session.status is SessionStatus.IDLE:
            self.session.transition(SessionStatus.AWAITING_MANUAL_AUTH)

        return {
            "success": True,
            "message": (
                "MANUAL STEP: Log in to LinkedIn in the opened browser window, "
                "then come back and start the harvest."
            ),
            "manualMode": True,
        }

    async def check_authenticated(self) -> bool:
        """Best-effort check that the page is logged in. Never raises."""
        authenticated = False
        page = self.page
        if page is not None:
            try:
                url = page.url or ""
                on_member_page = (
                    "linkedin.com/feed" in url
                    or "linkedin.com/search" in url
                    or "login" not in url
                )
                has_login_form = await page.evaluate(HAS_LOGIN_FORM_JS, LOGIN_FORM_SELECTOR)
                authenticated = on_member_page and not has_login_form
            except Exception as e:
                logger.debug("[harvest] Login check failed: %s", str(e)[:100])
                authenticated = False

        self.session.is_authenticated = authenticated
        if authenticated and self.session.status in (SessionStatus.IDLE, SessionStatus.AWAITING_MANUAL_AUTH):
            self.session.transition(SessionStatus.AUTHENTICATED)
        return authenticated

    async def harvest(self, filter_spec: FilterSpec, reporter: Reporter = None) -> list[Lead]:
        """Run a harvest for filter_spec and return normalized leads.

        Never returns more than filter_spec.max_leads leads. Stopping the
        session mid-run returns what was collected up to that point.

        Raises:
            AlreadyRunning: Another harvest is active.
            InitializationError: The browser could not be started.
            NotAuthenticated: The browser is not logged in.
            NavigationError: The search results could not be opened.
        """
        if self.session.is_harvesting:
            raise AlreadyRunning("Harvest already in progress")
        self._renew_session_if_stopped()
        session = self.session
        session.is_harvesting = True
        session.collected = []
        session.current_page = 0
        report = reporter or (lambda event: None)

        report(ProgressEvent(ProgressStatus.STARTING, "Initializing harvest..."))
        logger.info(
            "[harvest] Starting: %s in %s (max %d leads)",
            filter_spec.job_title, filter_spec.location, filter_spec.max_leads,
        )
        try:
            page = await self._ensure_browser()
            authenticated = not session.is_stopped and await self.check_authenticated()

            if session.is_stopped:
                # stop() landed during the launch or the login check
                if self.session is session:
                    await self._close_browser()
                logger.info("[harvest] Stopped before the first page")
            else:
                if not authenticated:
                    raise NotAuthenticated("Please log in to LinkedIn in the browser window first")
                session.transition(SessionStatus.HARVESTING)

                try:
                    await self._harvest_pages(page, filter_spec, session, report)
                except Exception as e:
                    if not session.is_stopped:
                        raise
                    logger.info("[harvest] Interrupted by stop: %s", str(e)[:100])

            leads = list(session.collected[:filter_spec.max_leads])
        except Exception as e:
            logger.error("[harvest] Failed (%s): %s", classify_error(e), str(e)[:200])
            report(ProgressEvent(ProgressStatus.ERROR, f"Harvest failed: {e}"))
            raise
        finally:
            session.is_harvesting = False
            if session.status is SessionStatus.HARVESTING:
                session.transition(SessionStatus.AUTHENTICATED)

        logger.info("[harvest] Completed. Total leads: %d", len(leads))
        report(ProgressEvent(
            ProgressStatus.COMPLETED,
            f"Harvest completed! Found {len(leads)} leads.",
            data=[lead.to_dict() for lead in leads],
        ))
        return leads

    async def _harvest_pages(self, page, filter_spec: FilterSpec, session: Session, report: Reporter) -> None:
        settings = self.settings
        search_url = build_search_url(filter_spec)
        logger.info("[harvest] Navigating to: %s", search_url)
        try:
            await page.goto(search_url, wait_until="domcontentloaded", timeout=settings.nav_timeout_ms)
        except Exception as e:
            raise NavigationError(f"Could not open search results: {str(e)[:200]}") from e

        await page.wait_for_timeout(settings.search_settle_ms)
        try:
            await page.wait_for_selector(RESULTS_CONTAINER_SELECTOR, timeout=settings.container_timeout_ms)
        except Exception:
            logger.info("[harvest] Results container not found, continuing anyway")

        seen_urls = set()
        session.current_page = 1
        while (
            len(session.collected) < filter_spec.max_leads
            and not session.is_stopped
            and session.current_page <= settings.max_pages
        ):
            logger.info("[harvest] Processing page %d", session.current_page)
            await self._scroll_results(page)

            page_leads = _drop_seen(await extract_page(page, filter_spec.location), seen_urls)
            remaining = filter_spec.max_leads - len(session.collected)
            batch = page_leads[:remaining]

            if batch:
                logger.info("[harvest] Found %d leads on page %d", len(page_leads), session.current_page)
                enriched = await enrich(page, batch, settings)
                session.collected.extend(normalize_leads(enriched)[:remaining])
                report(ProgressEvent(
                    ProgressStatus.PAGE,
                    f"Page {session.current_page}: {len(batch)} leads ({len(session.collected)} total)",
                    data={"page": session.current_page, "found": len(batch), "collected": len(session.collected)},
                ))
            else:
                logger.info("[harvest] No leads found on page %d", session.current_page)

            if len(session.collected) >= filter_spec.max_leads:
                logger.info("[harvest] Reached target of %d leads", filter_spec.max_leads)
                break

            # Sparse pages can still have a "Next" button
            if not await go_to_next_page(page):
                logger.info("[harvest] No more pages available")
                break

            session.current_page += 1
            await page.wait_for_timeout(settings.page_turn_ms)

    async def _scroll_results(self, page) -> None:
        """Scroll to the bottom so lazily rendered cards load."""
        try:
            await page.evaluate(SCROLL_TO_BOTTOM_JS)
        except Exception as e:
            logger.debug("[harvest] Scroll failed: %s", str(e)[:100])
        await page.wait_for_timeout(self.settings.scroll_settle_ms)

    async def stop(self) -> None:
        """Stop the session and close the browser. Safe to call repeatedly.

        A harvest in flight finishes its current step, then sees the stop at
        the top of its loop and returns what it has.
        """
        self.session.is_harvesting = False
        self.session.transition(SessionStatus.STOPPED)
        await self._close_browser()

    async def _close_browser(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            await handle.close()
            logger.info("[harvest] Browser closed")

    def status(self) -> dict:
        return self.session.to_dict()


def _drop_seen(leads: list[RawLead], seen_urls: set) -> list[RawLead]:
    """Drop leads whose profile was already taken this harvest."""
    fresh = []
    for lead in leads:
        if lead.profile_url != NOT_AVAILABLE:
            if lead.profile_url in seen_urls:
                continue
            seen_urls.add(lead.profile_url)
        fresh.append(lead)
    return fresh
