"""Centralized settings with environment + runtime config overlay.
Provides typed accessors to avoid scattering timeouts and limits across the pipeline.
"""
from __future__ import annotations
from pathlib import Path
import os, yaml
from dataclasses import dataclass
from typing import Optional

_RUNTIME_CACHE: dict | None = None

CONFIG_DIR = Path(__file__).resolve().parent.parent / 'config'

MAX_RESULTS_CAP = 25

DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36'
)

def _load_runtime() -> dict:
    global _RUNTIME_CACHE
    if _RUNTIME_CACHE is None:
        cfg_file = CONFIG_DIR / 'runtime.yml'
        if cfg_file.exists():
            try:
                _RUNTIME_CACHE = yaml.safe_load(cfg_file.read_text(encoding='utf-8')) or {}
            except yaml.YAMLError:
                _RUNTIME_CACHE = {}
        else:
            _RUNTIME_CACHE = {}
    return _RUNTIME_CACHE

def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is not None:
        try:
            return float(v)
        except ValueError:
            return default
    return float(_load_runtime().get(name.lower(), default))

def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is not None:
        try:
            return int(v)
        except ValueError:
            return default
    return int(_load_runtime().get(name.lower(), default))

def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    if v is not None:
        return v
    return str(_load_runtime().get(name.lower(), default))

def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        v = _load_runtime().get(name.lower())
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    return str(v).strip().lower() in ('1', 'true', 'yes', 'on')

@dataclass(frozen=True)
class Settings:
    cache_ttl_seconds: float = 300.0
    navigation_timeout_s: float = 15.0
    selector_timeout_s: float = 15.0
    scroll_iterations: int = 3
    scroll_pause_s: float = 2.0
    max_results: int = MAX_RESULTS_CAP  # hard ceiling; larger configured values are clamped
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    chromium_executable: Optional[str] = None
    navigation_retries: int = 0  # 0 or 1; only NavigationError is ever retried
    rate_limit_window_s: float = 1.0
    diagnostics_dir: Optional[str] = None  # unset disables HTML snapshots of failed pages

def load_settings() -> Settings:
    return Settings(
        cache_ttl_seconds=_env_float('SCRAPER_CACHE_TTL', 300.0),
        navigation_timeout_s=_env_float('SCRAPER_NAVIGATION_TIMEOUT', 15.0),
        selector_timeout_s=_env_float('SCRAPER_SELECTOR_TIMEOUT', 15.0),
        scroll_iterations=_env_int('SCRAPER_SCROLL_ITERATIONS', 3),
        scroll_pause_s=_env_float('SCRAPER_SCROLL_PAUSE', 2.0),
        max_results=max(1, min(_env_int('SCRAPER_MAX_RESULTS', MAX_RESULTS_CAP), MAX_RESULTS_CAP)),
        headless=_env_bool('SCRAPER_HEADLESS', True),
        user_agent=_env_str('SCRAPER_USER_AGENT', DEFAULT_USER_AGENT),
        chromium_executable=os.getenv('PLAYWRIGHT_CHROMIUM_EXECUTABLE_PATH') or None,
        navigation_retries=max(0, min(_env_int('SCRAPER_NAVIGATION_RETRIES', 0), 1)),
        rate_limit_window_s=_env_float('SCRAPER_RATE_LIMIT_WINDOW', 1.0),
        diagnostics_dir=os.getenv('SCRAPER_DIAGNOSTICS_DIR') or None,
    )

SETTINGS = load_settings()
