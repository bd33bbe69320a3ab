"""Global pytest fixtures.
 - Sets env vars to disable logging side effects (rotating file + JSONL events).
 - Resets the process-wide search service between tests.
"""
from __future__ import annotations
import os
import sys, pathlib
import pytest

# Add project root to sys.path for tests run without an editable install
ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True, scope="session")
def test_env_setup():
    os.environ.setdefault('SCRAPER_DISABLE_FILE_LOGS', '1')
    os.environ.setdefault('SCRAPER_DISABLE_EVENTS', '1')
    yield


@pytest.fixture(autouse=True)
def reset_default_service():
    from jobtracker.ingest.search import set_service
    set_service(None)
    yield
    set_service(None)
