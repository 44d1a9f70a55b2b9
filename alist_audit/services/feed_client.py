"""
Letterboxd feed client: URL construction and raw RSS retrieval.

The parser never sees HTTP; this module only returns text or raises one
of the FeedError subclasses (username missing / upstream status /
unreachable).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from alist_audit.core.config import settings
from alist_audit.core.errors import (
    FeedUnreachableError,
    FeedUpstreamError,
    UsernameMissingError,
)

logger = logging.getLogger(__name__)

_FEED_HEADERS = {"Accept": "application/rss+xml, application/xml"}


@dataclass
class FeedDocument:
    url: str
    text: str


def normalize_username(username: Optional[str]) -> str:
    if not username:
        return ""
    return username.strip().removeprefix("@").strip()


def build_feed_url(username: Optional[str]) -> Optional[str]:
    user = normalize_username(username)
    if not user:
        return None
    return f"{settings.LETTERBOXD_BASE_URL.rstrip('/')}/{user}/rss/"


def fetch_feed(
    username: Optional[str],
    client: Optional[httpx.Client] = None,
) -> FeedDocument:
    url = build_feed_url(username)
    if url is None:
        raise UsernameMissingError()

    owns_client = client is None
    http = client or httpx.Client(timeout=settings.FEED_TIMEOUT_SECONDS)
    try:
        response = http.get(url, headers=_FEED_HEADERS, follow_redirects=True)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning(
            "Letterboxd unreachable: %s",
            exc,
            extra={"event": "feed_unreachable", "context": {"url": url}},
        )
        raise FeedUnreachableError(url) from exc
    finally:
        if owns_client:
            http.close()

    if not response.is_success:
        logger.warning(
            "Letterboxd responded with %s",
            response.status_code,
            extra={"event": "feed_upstream_error", "context": {"url": url}},
        )
        raise FeedUpstreamError(response.status_code, url)

    return FeedDocument(url=url, text=response.text)
