"""Job search orchestration: cache lookup, browser session, extraction.

Public entry points are `search_jobs()` and `clear_cache()`, which delegate to a
process-wide `JobSearchService`. Blocked / not-found / navigation failures are
re-raised unchanged; zero-job results are returned but never cached.
"""
from __future__ import annotations
import logging
import threading
import time
from typing import Any, Callable, ContextManager, List, Optional
from .cache import ResultCache, cache_key
from .collector import build_search_url, open_search_page
from .errors import NavigationError, SearchError
from .extract import extract_listings
from .logging_config import log_event
from .models import JobListing, SearchResult
from .settings import SETTINGS, Settings

logger = logging.getLogger("search")

SessionFactory = Callable[[str, Settings], ContextManager[Any]]
Extractor = Callable[[Any, int], List[JobListing]]


class JobSearchService:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[ResultCache] = None,
        session_factory: Optional[SessionFactory] = None,
        extractor: Optional[Extractor] = None,
    ):
        self.settings = settings or SETTINGS
        self.cache = cache if cache is not None else ResultCache(self.settings.cache_ttl_seconds)
        self._open_page = session_factory or open_search_page
        self._extract = extractor or extract_listings

    def search_jobs(self, query: str, location: Optional[str] = None) -> SearchResult:
        if not query or not query.strip():
            raise ValueError("Search query is required")
        location = location or None
        key = cache_key(query, location)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Cache hit for '{key}' ({cached.total_results} jobs)")
            log_event('cache_hit', key=key, total=cached.total_results)
            return cached
        log_event('cache_miss', key=key)

        url = build_search_url(query, location)
        logger.info(f"Starting search: keywords='{query}' location='{location or ''}'")
        log_event('search_start', keywords=query, location=location or '')
        start_time = time.time()
        try:
            jobs = self._run_session(url)
        except SearchError as e:
            logger.warning(f"Search failed ({e.code}): {e}")
            log_event('search_failed', key=key, reason=e.code, message=str(e))
            raise

        result = SearchResult.from_jobs(jobs)
        if result.total_results == 0:
            # never pin an empty page; the next call goes upstream again
            log_event('cache_skip_empty', key=key)
        else:
            self.cache.put(key, result)
            evicted = self.cache.sweep()
            log_event('cache_store', key=key, total=result.total_results, evicted=evicted)
        elapsed = round(time.time() - start_time, 2)
        logger.info(f"Completed search: collected={result.total_results} elapsed={elapsed}s")
        log_event('search_complete', key=key, collected=result.total_results, elapsed_s=elapsed)
        return result

    def _run_session(self, url: str) -> List[JobListing]:
        attempts = 1 + self.settings.navigation_retries
        attempt = 1
        while True:
            try:
                with self._open_page(url, self.settings) as page:
                    return self._extract(page, self.settings.max_results)
            except NavigationError as e:
                # Blocked / not-found are never retried; they fall straight through.
                if attempt >= attempts:
                    raise
                logger.warning(f"Navigation failed (attempt {attempt}/{attempts}), retrying: {e}")
                attempt += 1

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Search cache cleared")
        log_event('cache_cleared')


_DEFAULT_SERVICE: Optional[JobSearchService] = None
_DEFAULT_LOCK = threading.Lock()


def get_service() -> JobSearchService:
    global _DEFAULT_SERVICE
    with _DEFAULT_LOCK:
        if _DEFAULT_SERVICE is None:
            _DEFAULT_SERVICE = JobSearchService()
        return _DEFAULT_SERVICE


def set_service(service: Optional[JobSearchService]) -> None:
    """Swap the process-wide service (None resets to a fresh default on next use)."""
    global _DEFAULT_SERVICE
    with _DEFAULT_LOCK:
        _DEFAULT_SERVICE = service


def search_jobs(query: str, location: Optional[str] = None) -> SearchResult:
    return get_service().search_jobs(query, location)


def clear_cache() -> None:
    get_service().clear_cache()
