from __future__ import annotations
"""Turn result cards of a loaded search page into JobListing records.

One malformed card must never lose the rest of the page: any error while
reading a card skips that card only.
"""
import logging
from typing import Any, List, Optional
from .errors import NavigationError
from .models import JobListing
from .logging_config import log_event
from .settings import MAX_RESULTS_CAP

logger = logging.getLogger("extract")

RESULTS_LIST_SELECTOR = '.jobs-search__results-list'
CARD_SELECTOR = f'{RESULTS_LIST_SELECTOR} > li'
TITLE_SELECTOR = '.base-search-card__title'
COMPANY_SELECTOR = '.base-search-card__subtitle'
LOCATION_SELECTOR = '.job-search-card__location'
LINK_SELECTOR = 'a.base-card__full-link'
POSTED_SELECTOR = 'time'

MAX_RESULTS = MAX_RESULTS_CAP


def _text(card: Any, selector: str) -> str:
    el = card.query_selector(selector)
    if not el:
        return ''
    return (el.text_content() or '').strip()


def _attr(card: Any, selector: str, attr: str) -> Optional[str]:
    el = card.query_selector(selector)
    if not el:
        return None
    v = el.get_attribute(attr)
    return v.strip() if v else None


def strip_tracking(url: str) -> str:
    return url.split('?', 1)[0]


def parse_card(card: Any) -> Optional[JobListing]:
    """Read one result card; None when title or company is missing."""
    title = _text(card, TITLE_SELECTOR)
    company = _text(card, COMPANY_SELECTOR)
    location = _text(card, LOCATION_SELECTOR)
    href = _attr(card, LINK_SELECTOR, 'href') or ''
    posted = _attr(card, POSTED_SELECTOR, 'datetime')
    if not title or not company:
        return None
    return JobListing(
        title=title,
        company=company,
        location=location,
        url=strip_tracking(href),
        posted_date=posted,
    )


def extract_listings(page: Any, max_results: int = MAX_RESULTS) -> List[JobListing]:
    """Parse up to `max_results` cards (never more than MAX_RESULTS) in document order.

    Losing the page itself (closed tab, crashed browser) is a NavigationError;
    problems inside a single card only skip that card.
    """
    from playwright.sync_api import Error as PlaywrightError  # type: ignore
    max_results = min(max_results, MAX_RESULTS)
    try:
        cards = page.query_selector_all(CARD_SELECTOR)[:max_results]
    except PlaywrightError as e:
        raise NavigationError(f"Failed to read result cards: {e}") from e
    jobs: List[JobListing] = []
    for idx, card in enumerate(cards):
        try:
            job = parse_card(card)
        except Exception as e:
            logger.warning(f"Failed to extract job card #{idx}: {e}")
            log_event('listing_skipped', index=idx, message=str(e))
            continue
        if job is None:
            logger.debug(f"Skipping card #{idx}: missing title or company")
            continue
        jobs.append(job)
    logger.debug(f"Extracted {len(jobs)} of {len(cards)} cards")
    return jobs
