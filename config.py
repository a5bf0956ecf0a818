"""
Runtime settings for the lead harvester.

Values come from environment variables (optionally via a .env file next to
the working directory). Timings are in milliseconds because they are handed
straight to Playwright's wait/timeout arguments.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Harvester timings and limits.

    Attributes:
        headless: Run Camoufox without a window. Off by default since the
            user has to log in through the browser window.
        max_pages: Ceiling on search result pages visited per harvest.
        search_settle_ms: Wait after the first search navigation.
        scroll_settle_ms: Wait after scrolling a results page.
        page_turn_ms: Wait after clicking "Next".
        container_timeout_ms: How long to wait for the results container.
        nav_timeout_ms: Timeout for search navigations.
        profile_timeout_ms: Timeout for profile navigations during enrichment.
        profile_settle_ms: Wait after a profile loads.
        profile_scroll_ms: Wait after the small scroll on a profile.
        return_settle_ms: Wait after going back to the results.
        output_dir: Where the CLI writes exports.
    """
    headless: bool = False
    max_pages: int = 5
    search_settle_ms: int = 5000
    scroll_settle_ms: int = 3000
    page_turn_ms: int = 3000
    container_timeout_ms: int = 10000
    nav_timeout_ms: int = 30000
    profile_timeout_ms: int = 15000
    profile_settle_ms: int = 3000
    profile_scroll_ms: int = 1000
    return_settle_ms: int = 2000
    output_dir: Path = Path("output")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            headless=_env_flag("HARVEST_HEADLESS"),
            max_pages=_env_int("HARVEST_MAX_PAGES", 5),
            search_settle_ms=_env_int("HARVEST_SEARCH_SETTLE_MS", 5000),
            scroll_settle_ms=_env_int("HARVEST_SCROLL_SETTLE_MS", 3000),
            page_turn_ms=_env_int("HARVEST_PAGE_TURN_MS", 3000),
            container_timeout_ms=_env_int("HARVEST_CONTAINER_TIMEOUT_MS", 10000),
            nav_timeout_ms=_env_int("HARVEST_NAV_TIMEOUT_MS", 30000),
            profile_timeout_ms=_env_int("HARVEST_PROFILE_TIMEOUT_MS", 15000),
            profile_settle_ms=_env_int("HARVEST_PROFILE_SETTLE_MS", 3000),
            profile_scroll_ms=_env_int("HARVEST_PROFILE_SCROLL_MS", 1000),
            return_settle_ms=_env_int("HARVEST_RETURN_SETTLE_MS", 2000),
            output_dir=Path(os.environ.get("HARVEST_OUTPUT_DIR", "output")),
        )


_SETTINGS = None


def get_settings() -> Settings:
    """Get settings, reading the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
