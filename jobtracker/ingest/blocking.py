"""Login / checkpoint wall detection.

Invoked only after the results container failed to show up. Six independent
signals are read from the page; any one of them classifies the page as
blocked. Otherwise the missing container is attributed to a markup change or a
genuinely empty render.
"""
from __future__ import annotations
import logging
from typing import Any
from urllib.parse import urlparse
from .models import BlockingIndicators, PageState

logger = logging.getLogger("blocking")

SIGN_IN_MARKUP = 'sign-in-form'
JOIN_NOW_MARKUP = 'join-now'
SIGN_IN_TEXT = 'Sign in'
JOIN_SITE_TEXT = 'Join LinkedIn'
LOGIN_PATH_SEGMENTS = ('/login', '/authwall')
CHECKPOINT_PATH_SEGMENT = '/checkpoint'


def detect_indicators(html: str, body_text: str, url: str) -> BlockingIndicators:
    html = html or ''
    body_text = body_text or ''
    try:
        path = urlparse(url or '').path.lower()
    except ValueError:
        path = ''
    return BlockingIndicators(
        sign_in_markup=SIGN_IN_MARKUP in html,
        join_now_markup=JOIN_NOW_MARKUP in html,
        sign_in_text=SIGN_IN_TEXT in body_text,
        join_site_text=JOIN_SITE_TEXT in body_text,
        login_url=any(seg in path for seg in LOGIN_PATH_SEGMENTS),
        checkpoint_url=CHECKPOINT_PATH_SEGMENT in path,
    )


def read_indicators(page: Any) -> BlockingIndicators:
    """Pull markup, visible body text and current URL from a live page."""
    html = page.content()
    body_text = page.inner_text('body')
    return detect_indicators(html, body_text, page.url)


def classify(indicators: BlockingIndicators) -> PageState:
    if indicators.any():
        logger.debug(f"Blocking signals: {indicators.triggered()}")
        return PageState.BLOCKED
    return PageState.NOT_FOUND
