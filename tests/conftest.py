from __future__ import annotations
import os
import sys, pathlib
import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True, scope="session")
def test_env_setup():
    os.environ.setdefault('SCRAPER_DISABLE_FILE_LOGS', '1')
    os.environ.setdefault('SCRAPER_DISABLE_EVENTS', '1')
    yield
