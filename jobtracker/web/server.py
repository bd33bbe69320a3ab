from __future__ import annotations
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import math
import os
import threading
import time

# Internal imports
from jobtracker.ingest.errors import (
    SearchError,
    BlockedError,
    ListingsNotFoundError,
    NavigationError,
)
from jobtracker.ingest.search import get_service
from jobtracker.ingest.settings import SETTINGS

logger = logging.getLogger("web")

app = FastAPI(title="Job Tracker search API")

origins = [
    "http://127.0.0.1:5173",
    "http://localhost:5173",
    "http://127.0.0.1:8000",
    "http://localhost:8000",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Per-client fixed window: client ip -> monotonic time of the last accepted search
LAST_SEARCH: dict[str, float] = {}
_RATE_LOCK = threading.Lock()
RATE_LIMIT_WINDOW = SETTINGS.rate_limit_window_s  # seconds between searches per client

ERROR_STATUS = {
    BlockedError: 503,
    ListingsNotFoundError: 502,
    NavigationError: 502,
}


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _retry_after(ip: str) -> int:
    """Seconds the client still has to wait; 0 when the call is accepted (and recorded)."""
    now = time.monotonic()
    with _RATE_LOCK:
        last = LAST_SEARCH.get(ip)
        if last is not None and now - last < RATE_LIMIT_WINDOW:
            return max(1, math.ceil(RATE_LIMIT_WINDOW - (now - last)))
        LAST_SEARCH[ip] = now
        # drop stale clients
        cutoff = now - RATE_LIMIT_WINDOW * 2
        for k in [k for k, t in LAST_SEARCH.items() if t < cutoff]:
            LAST_SEARCH.pop(k, None)
    return 0


def _status_for(err: SearchError) -> int:
    for cls, status in ERROR_STATUS.items():
        if isinstance(err, cls):
            return status
    return 500


@app.get("/api/linkedin/search")
def search(request: Request, q: str | None = None, location: str | None = None):
    # Plain `def`: runs in the worker threadpool, where the sync Playwright API is allowed.
    # Validate first so a rejected request does not use up the client's window.
    if not q or not q.strip():
        return JSONResponse(status_code=400, content={
            "error": "Invalid request",
            "details": ["q: Search query is required"],
        })
    wait = _retry_after(_client_ip(request))
    if wait:
        return JSONResponse(status_code=429, content={
            "error": "Too many requests",
            "message": f"Please wait {wait} seconds before searching again",
            "retryAfter": wait,
        })
    try:
        result = get_service().search_jobs(q, location or None)
    except SearchError as e:
        status = _status_for(e)
        logger.error(f"LinkedIn search error ({e.code}): {e}")
        return JSONResponse(status_code=status, content={
            "error": "Search failed",
            "reason": e.code,
            "message": str(e),
        })
    payload = {"success": True}
    payload.update(result.model_dump(mode="json", by_alias=True))
    return payload


@app.post("/api/linkedin/cache/clear")
def clear_search_cache():
    get_service().clear_cache()
    return {"success": True, "message": "Cache cleared"}


@app.get("/health")
def health():
    service = get_service()
    return {"status": "ok", "cached_searches": len(service.cache), "rate_window": RATE_LIMIT_WINDOW, "rate_clients": len(LAST_SEARCH)}


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(app, host="127.0.0.1", port=port)
