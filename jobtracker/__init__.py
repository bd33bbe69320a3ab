"""Job tracker search ingestion public API."""
from importlib import metadata as _metadata

try:
    __version__ = _metadata.version("jobtracker-search")
except _metadata.PackageNotFoundError:  # fallback when not installed
    __version__ = "0.1.0"

from .ingest.search import search_jobs, clear_cache  # re-export
from .ingest.models import JobListing, SearchResult  # re-export

__all__ = ["__version__", "search_jobs", "clear_cache", "JobListing", "SearchResult"]
