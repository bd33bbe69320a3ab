"""Failure kinds surfaced by a job search.

Only these propagate to callers; per-listing extraction problems are absorbed
by the extractor.
"""
from __future__ import annotations


class SearchError(Exception):
    """Base search failure."""

    code = "search_error"


class BlockedError(SearchError):
    """Upstream served a login / checkpoint wall instead of results."""

    code = "blocked"

    def __init__(self, message: str, signals: list[str] | None = None):
        super().__init__(message)
        self.signals = signals or []


class ListingsNotFoundError(SearchError):
    """Results container missing without any blocking signal (markup change or empty render)."""

    code = "listings_not_found"


class NavigationError(SearchError):
    """Browser launch, network or navigation failure."""

    code = "navigation_error"
