"""
Camoufox browser ownership for a harvesting session.

Camoufox is a Firefox-based anti-detect browser with the Playwright API. The
session keeps one browser and one page open across the manual login pause
and the harvest, so the browser is entered through an AsyncExitStack rather
than an `async with` block around a single scrape.
"""

import logging
import os
from contextlib import AsyncExitStack

from camoufox.async_api import AsyncCamoufox

from config import Settings
from errors import InitializationError

logger = logging.getLogger(__name__)

VIEWPORT = {"width": 1280, "height": 720}


class BrowserHandle:
    """The browser/page pair owned by the live session.

    Only the session controller creates or closes a handle.
    """

    def __init__(self, page, stack: AsyncExitStack):
        self.page = page
        self._stack = stack
        self.closed = False

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            await self._stack.aclose()
        except Exception as e:
            logger.warning("[browser] Error while closing browser: %s", str(e)[:200])


async def launch_browser(settings: Settings) -> BrowserHandle:
    """Start Camoufox and open the page the session will drive.

    Raises:
        InitializationError: If the browser cannot be started.
    """
    # headless="virtual" uses an Xvfb display on Linux; a visible window is
    # needed when the user has to log in by hand.
    is_linux = os.name != 'nt'
    if settings.headless:
        headless_mode = "virtual" if is_linux else True
    else:
        headless_mode = False

    logger.info("[browser] Starting Camoufox (headless=%s)", headless_mode)
    stack = AsyncExitStack()
    try:
        browser = await stack.enter_async_context(AsyncCamoufox(
            headless=headless_mode,
            humanize=True,  # Human-like mouse movements
            block_webrtc=True,
            os="windows",
        ))
        page = await browser.new_page(viewport=VIEWPORT)
    except Exception as e:
        try:
            await stack.aclose()
        except Exception as close_error:
            logger.debug("[browser] Cleanup after failed start: %s", str(close_error)[:100])
        raise InitializationError(f"Could not start browser: {str(e)[:200]}") from e

    logger.info("[browser] Browser started successfully")
    return BrowserHandle(page, stack)
