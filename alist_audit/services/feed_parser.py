"""
Letterboxd RSS parser.

parse_feed(raw) -> list[WatchRecord]

The feed is third-party output: items without a usable title or date are
dropped, never raised. Parsing is regex based so a truncated or partially
malformed document still yields every complete <item> block.
"""
from __future__ import annotations

import html
import logging
import math
import re
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

from alist_audit.services.records import WatchRecord

logger = logging.getLogger(__name__)

_ITEM_RE = re.compile(r"<item>([\s\S]*?)</item>")
_CDATA_RE = re.compile(r"<!\[CDATA\[|\]\]>")
_FILM_SLUG_RE = re.compile(r"letterboxd\.com/[^/]+/film/([^/]+)", re.IGNORECASE)
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def decode_text(value: str) -> str:
    """Strip CDATA wrappers and decode entity / character references."""
    return html.unescape(_CDATA_RE.sub("", value)).strip()


def extract_tag(block: str, tag: str) -> Optional[str]:
    match = re.search(
        rf"<{re.escape(tag)}[^>]*>([\s\S]*?)</{re.escape(tag)}>",
        block,
        re.IGNORECASE,
    )
    if not match:
        return None
    return decode_text(match.group(1))


def slugify(title: str) -> str:
    return _NON_SLUG_RE.sub("-", title.lower()).strip("-")


def to_calendar_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an ISO date/datetime or an RFC-822 timestamp into a calendar date.
    Aware timestamps are normalised to UTC first. Returns None if unparseable.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError, OverflowError):
            return None
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc)
        except OverflowError:
            # Aware timestamp at the edge of the datetime range.
            return None
    return parsed.date()


def parse_rating(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        rating = float(value)
    except ValueError:
        return None
    return rating if math.isfinite(rating) else None


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def parse_item(block: str) -> Optional[WatchRecord]:
    """Build a WatchRecord from one <item> body, or None if it is unusable."""
    title = extract_tag(block, "letterboxd:filmTitle") or extract_tag(block, "title")
    watched_raw = (
        extract_tag(block, "letterboxd:watchedDate") or extract_tag(block, "pubDate")
    )
    watch_date = to_calendar_date(watched_raw)
    if not title or watch_date is None:
        return None

    link = extract_tag(block, "link") or extract_tag(block, "guid")
    slug_match = _FILM_SLUG_RE.search(link) if link else None
    source_id = slug_match.group(1) if slug_match else None

    id_base = source_id or slugify(title)

    return WatchRecord(
        id=f"{id_base}-{watch_date.isoformat()}",
        title=title,
        watch_date=watch_date,
        source_id=source_id,
        counts_toward_membership=False,
        rating=parse_rating(extract_tag(block, "letterboxd:memberRating")),
        added_manually=False,
    )


def parse_feed(raw: str) -> list[WatchRecord]:
    results: list[WatchRecord] = []
    dropped = 0
    for match in _ITEM_RE.finditer(raw or ""):
        record = parse_item(match.group(1))
        if record is None:
            dropped += 1
            logger.debug("Dropped feed item without usable title/date")
            continue
        results.append(record)

    logger.info(
        "Parsed Letterboxd feed",
        extra={"event": "feed_parsed", "context": {"kept": len(results), "dropped": dropped}},
    )
    return results
