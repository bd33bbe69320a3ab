"""Logging for the search pipeline.

Searches run concurrently (one browser per worker thread), so log lines carry
the thread name and structured events are appended under a lock to keep every
JSONL record whole.
"""
from __future__ import annotations
import logging
import os
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
import json
from datetime import datetime, timezone

LOG_DIR = Path(__file__).resolve().parent.parent / 'logs'

_DEF_FORMAT = '%(asctime)s %(levelname)s [%(threadName)s] %(name)s %(message)s'

_EVENT_LOCK = threading.Lock()


def _file_logs_disabled() -> bool:
    return bool(os.getenv('SCRAPER_DISABLE_FILE_LOGS'))


def _events_disabled() -> bool:
    return bool(os.getenv('SCRAPER_DISABLE_EVENTS'))


def events_file() -> Path:
    override = os.getenv('SCRAPER_EVENTS_FILE')
    return Path(override) if override else LOG_DIR / 'search.events.jsonl'


def setup_logging(debug: bool = False):
    root = logging.getLogger()
    if root.handlers:
        # already configured (uvicorn / pytest)
        return
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    if not _file_logs_disabled():
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(LOG_DIR / 'search.log', maxBytes=1_000_000, backupCount=5, encoding='utf-8')
        fh.setFormatter(logging.Formatter(_DEF_FORMAT))
        root.addHandler(fh)
    ch = logging.StreamHandler()
    ch.setFormatter(logging.Formatter('%(levelname)s [%(threadName)s] %(message)s'))
    ch.setLevel(logging.DEBUG if debug else logging.INFO)
    root.addHandler(ch)
    # browser driver chatter and per-request access lines drown out search progress
    for noisy in ('playwright', 'asyncio', 'uvicorn.access'):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def log_event(event: str, **fields):
    """Append one structured JSON line (search_start, cache_hit, page_blocked, ...)."""
    if _events_disabled():
        return
    rec = {
        'ts': datetime.now(timezone.utc).isoformat(timespec='milliseconds'),
        'event': event,
        'thread': threading.current_thread().name,
    }
    rec.update(fields)
    line = json.dumps(rec, ensure_ascii=False, default=str) + '\n'
    path = events_file()
    try:
        with _EVENT_LOCK:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open('a', encoding='utf-8') as f:
                f.write(line)
    except OSError:
        logging.getLogger(__name__).debug('Failed to write structured log line', exc_info=True)
