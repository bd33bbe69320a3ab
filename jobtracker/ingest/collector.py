from __future__ import annotations
"""
Playwright-based session driver for the public LinkedIn job search.

Each search drives its own browser; nothing is shared between calls. Steps are
bounded individually (page load, results wait, fixed lazy-load scroll) rather
than by one global deadline.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional
from urllib.parse import urlencode
import logging
import time
from .settings import SETTINGS, Settings
from .blocking import read_indicators, classify
from .errors import BlockedError, ListingsNotFoundError, NavigationError
from .extract import RESULTS_LIST_SELECTOR
from .logging_config import log_event
from .models import PageState

logger = logging.getLogger('collector')

SEARCH_BASE_URL = 'https://www.linkedin.com/jobs/search/'

# Sandbox flags needed for container images (Alpine / ARM64 chromium builds)
LAUNCH_ARGS = ['--no-sandbox', '--disable-setuid-sandbox', '--disable-dev-shm-usage']

SCROLL_TO_BOTTOM_JS = """
sel => {
    const el = document.querySelector(sel);
    if (el) {
        el.scrollTo(0, el.scrollHeight);
    }
}
"""


def build_search_url(query: str, location: Optional[str] = None) -> str:
    params = {'keywords': query}
    if location:
        params['location'] = location
    return f"{SEARCH_BASE_URL}?{urlencode(params)}"


def _ms(seconds: float) -> float:
    return seconds * 1000.0


def _save_diagnostics(page: Any, label: str, settings: Settings) -> None:
    if not settings.diagnostics_dir:
        return
    try:
        out_dir = Path(settings.diagnostics_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        snap = out_dir / f"{label}_{int(time.time() * 1000)}.html"
        snap.write_text(page.content(), encoding='utf-8')
        log_event('diagnostics_saved', html=str(snap))
    except Exception:
        logger.debug("Failed to save diagnostics", exc_info=True)


def _raise_for_missing_results(page: Any, url: str, settings: Settings):
    """Results container never appeared: decide between blocked and not found."""
    from playwright.sync_api import Error as PlaywrightError  # type: ignore
    try:
        indicators = read_indicators(page)
    except PlaywrightError as e:
        raise NavigationError(f"Could not inspect page after results wait: {e}") from e
    state = classify(indicators)
    if state is PageState.BLOCKED:
        signals = indicators.triggered()
        logger.warning(f"Blocked by login/checkpoint wall (signals={signals}) url={page.url}")
        log_event('page_blocked', url=url, signals=signals)
        _save_diagnostics(page, 'blocked', settings)
        raise BlockedError("LinkedIn is requiring sign-in; search blocked", signals=signals)
    logger.warning(f"Results list not found and no blocking signal; markup may have changed url={page.url}")
    log_event('listings_not_found', url=url)
    _save_diagnostics(page, 'no_results', settings)
    raise ListingsNotFoundError("Job results list not found on page")


def prepare_page(page: Any, url: str, settings: Settings = SETTINGS) -> PageState:
    """Navigate, wait for results and run the lazy-load scroll on an open page.

    Returns PageState.READY or raises BlockedError / ListingsNotFoundError /
    NavigationError.
    """
    from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError  # type: ignore
    page.set_extra_http_headers({'User-Agent': settings.user_agent})
    logger.debug(f"Navigating to {url}")
    try:
        page.goto(url, wait_until='networkidle', timeout=_ms(settings.navigation_timeout_s))
    except PlaywrightTimeoutError:
        # Content often renders before the network goes idle; carry on.
        logger.warning(f"Network did not settle within {settings.navigation_timeout_s}s; continuing")
        log_event('navigation_timeout', url=url)
    except PlaywrightError as e:
        raise NavigationError(f"Failed to load search page: {e}") from e

    try:
        page.wait_for_selector(RESULTS_LIST_SELECTOR, timeout=_ms(settings.selector_timeout_s))
    except PlaywrightTimeoutError:
        _raise_for_missing_results(page, url, settings)
    except PlaywrightError as e:
        raise NavigationError(f"Failed waiting for results: {e}") from e

    try:
        for i in range(settings.scroll_iterations):
            page.evaluate(SCROLL_TO_BOTTOM_JS, RESULTS_LIST_SELECTOR)
            page.wait_for_timeout(_ms(settings.scroll_pause_s))
            logger.debug(f"Scroll iteration {i + 1}/{settings.scroll_iterations}")
    except PlaywrightError as e:
        raise NavigationError(f"Failed while scrolling results: {e}") from e
    return PageState.READY


@contextmanager
def open_search_page(url: str, settings: Settings = SETTINGS) -> Iterator[Any]:
    """Yield a loaded, scroll-exhausted page for `url`; the browser is closed on exit."""
    # Lazy import: playwright is heavy and only needed when actually searching.
    from playwright.sync_api import sync_playwright, Error as PlaywrightError  # type: ignore
    try:
        pw = sync_playwright().start()
    except PlaywrightError as e:
        raise NavigationError(f"Failed to start Playwright: {e}") from e
    try:
        try:
            browser = pw.chromium.launch(
                headless=settings.headless,
                executable_path=settings.chromium_executable,
                args=LAUNCH_ARGS,
            )
        except PlaywrightError as e:
            logger.error(f"Failed to launch browser: {e}")
            log_event('error', stage='launch', message=str(e))
            raise NavigationError(f"Failed to launch browser: {e}") from e
        try:
            try:
                page = browser.new_page()
            except PlaywrightError as e:
                raise NavigationError(f"Failed to open page: {e}") from e
            prepare_page(page, url, settings)
            yield page
        finally:
            try:
                browser.close()
            except PlaywrightError:
                logger.debug("Failed closing browser", exc_info=True)
    finally:
        pw.stop()
