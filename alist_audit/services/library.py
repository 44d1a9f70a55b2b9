"""
Library service: the persisted record set + settings that the pure engine
is fed from.

Public API
----------
list_movies(db, filter, sort)                 -> list[WatchRecordRow]
recent_activity(db, limit)                    -> list[WatchRecordRow]
add_manual_movie(db, ManualMovie)             -> WatchRecordRow
toggle_membership(db, movie_id)               -> WatchRecordRow
set_notes(db, movie_id, notes)                -> WatchRecordRow
bulk_update(db, ids, flag)                    -> int
bulk_delete(db, ids)                          -> int
clear_movies(db)                              -> int
sync_from_feed(db, username, client, now)     -> SyncResult
get_settings / update_settings / reset_settings
load_records(db) / to_membership_settings(row)

Stored rows are converted to frozen WatchRecord values before any
calculation; the engine never holds a session or a row.
"""
from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional

import httpx
from sqlalchemy import func
from sqlalchemy.orm import Session

from alist_audit.core.errors import (
    DuplicateMovieError,
    EmptySelectionError,
    MovieNotFoundError,
)
from alist_audit.models.user_settings import DEFAULTS, SETTINGS_ROW_ID, UserSettings
from alist_audit.models.watch_record import WatchRecordRow
from alist_audit.services.feed_client import fetch_feed, normalize_username
from alist_audit.services.feed_parser import parse_feed
from alist_audit.services.reconciler import merge_with_summary
from alist_audit.services.records import MembershipSettings, WatchRecord

logger = logging.getLogger(__name__)


class MovieFilter(str, enum.Enum):
    all = "all"
    flagged = "flagged"
    unflagged = "unflagged"


class MovieSort(str, enum.Enum):
    date = "date"
    title = "title"
    savings = "savings"


@dataclass
class ManualMovie:
    """Lightweight DTO so the service layer stays schema-agnostic."""
    title: str
    watch_date: date
    counts_toward_membership: bool = True
    rating: Optional[float] = None
    notes: Optional[str] = None
    id: Optional[str] = None


@dataclass
class SyncResult:
    source: str
    username: str
    fetched: int
    added: int
    updated: int
    preserved: int
    total: int
    last_sync: datetime


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------

def to_record(row: WatchRecordRow) -> WatchRecord:
    return WatchRecord(
        id=row.id,
        title=row.title,
        watch_date=row.watch_date,
        source_id=row.source_id,
        counts_toward_membership=row.counts_toward_membership,
        rating=row.rating,
        added_manually=row.added_manually,
        notes=row.notes,
    )


def to_membership_settings(row: UserSettings) -> MembershipSettings:
    return MembershipSettings(
        subscription_cost=row.subscription_cost,
        start_date=row.start_date,
        avg_ticket_price=row.avg_ticket_price,
        is_active=row.is_active,
    )


def _rows(db: Session) -> list[WatchRecordRow]:
    return (
        db.query(WatchRecordRow)
        .order_by(WatchRecordRow.position, WatchRecordRow.id)
        .all()
    )


def load_records(db: Session) -> list[WatchRecord]:
    return [to_record(r) for r in _rows(db)]


def _get_row(db: Session, movie_id: str) -> WatchRecordRow:
    row = db.get(WatchRecordRow, movie_id)
    if row is None:
        raise MovieNotFoundError(movie_id)
    return row


def _next_position(db: Session) -> int:
    current = db.query(func.max(WatchRecordRow.position)).scalar()
    return 0 if current is None else current + 1


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_movies(
    db: Session,
    movie_filter: MovieFilter = MovieFilter.all,
    sort: MovieSort = MovieSort.date,
) -> list[WatchRecordRow]:
    rows = _rows(db)
    if movie_filter is MovieFilter.flagged:
        rows = [r for r in rows if r.counts_toward_membership]
    elif movie_filter is MovieFilter.unflagged:
        rows = [r for r in rows if not r.counts_toward_membership]

    # Newest first is the base order; sorts below are stable on top of it.
    rows.sort(key=lambda r: r.watch_date, reverse=True)
    if sort is MovieSort.title:
        rows.sort(key=lambda r: r.title.casefold())
    elif sort is MovieSort.savings:
        # Every flagged trip is worth the same average ticket, so this
        # reduces to flagged-first.
        rows.sort(key=lambda r: not r.counts_toward_membership)
    return rows


def recent_activity(db: Session, limit: int = 5) -> list[WatchRecordRow]:
    return list_movies(db, MovieFilter.flagged, MovieSort.date)[:limit]


# ---------------------------------------------------------------------------
# Curation
# ---------------------------------------------------------------------------

def add_manual_movie(db: Session, movie: ManualMovie) -> WatchRecordRow:
    movie_id = movie.id or f"manual-{uuid.uuid4().hex}"
    if db.get(WatchRecordRow, movie_id) is not None:
        raise DuplicateMovieError(movie_id)

    row = WatchRecordRow(
        id=movie_id,
        title=movie.title.strip(),
        watch_date=movie.watch_date,
        source_id=None,
        counts_toward_membership=movie.counts_toward_membership,
        rating=movie.rating,
        added_manually=True,
        notes=movie.notes,
        position=_next_position(db),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def toggle_membership(db: Session, movie_id: str) -> WatchRecordRow:
    row = _get_row(db, movie_id)
    row.counts_toward_membership = not row.counts_toward_membership
    db.commit()
    db.refresh(row)
    return row


def set_notes(db: Session, movie_id: str, notes: Optional[str]) -> WatchRecordRow:
    row = _get_row(db, movie_id)
    row.notes = notes or None
    db.commit()
    db.refresh(row)
    return row


def bulk_update(db: Session, ids: list[str], flag: bool) -> int:
    """Set the membership flag on every listed movie. Unknown ids are ignored."""
    if not ids:
        raise EmptySelectionError()
    updated = (
        db.query(WatchRecordRow)
        .filter(WatchRecordRow.id.in_(set(ids)))
        .update({WatchRecordRow.counts_toward_membership: flag}, synchronize_session=False)
    )
    db.commit()
    return updated


def bulk_delete(db: Session, ids: list[str]) -> int:
    if not ids:
        raise EmptySelectionError()
    deleted = (
        db.query(WatchRecordRow)
        .filter(WatchRecordRow.id.in_(set(ids)))
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


def clear_movies(db: Session) -> int:
    deleted = db.query(WatchRecordRow).delete(synchronize_session=False)
    db.commit()
    return deleted


# ---------------------------------------------------------------------------
# Feed sync
# ---------------------------------------------------------------------------

def _store_merged(db: Session, merged: list[WatchRecord]) -> None:
    """Write the merged set back in merged order. Nothing is deleted."""
    existing = {row.id: row for row in _rows(db)}
    for position, record in enumerate(merged):
        row = existing.get(record.id)
        if row is None:
            row = WatchRecordRow(id=record.id)
            db.add(row)
        row.title = record.title
        row.watch_date = record.watch_date
        row.source_id = record.source_id
        row.counts_toward_membership = record.counts_toward_membership
        row.rating = record.rating
        row.added_manually = record.added_manually
        row.notes = record.notes
        row.position = position


def sync_from_feed(
    db: Session,
    username: Optional[str] = None,
    client: Optional[httpx.Client] = None,
    now: Optional[datetime] = None,
) -> SyncResult:
    """
    Fetch → parse → merge → persist.
    Any fetch error propagates before the session is touched, so the stored
    record set stays as it was.
    """
    row = get_settings(db)
    user = normalize_username(username) or row.letterboxd_username

    document = fetch_feed(user, client=client)
    incoming = parse_feed(document.text)
    summary = merge_with_summary(incoming, load_records(db))

    _store_merged(db, summary.records)
    synced_at = now or datetime.now(tz=timezone.utc)
    row.letterboxd_username = user
    row.last_sync = synced_at
    db.commit()

    logger.info(
        "Letterboxd sync complete",
        extra={
            "event": "feed_synced",
            "context": {
                "username": user,
                "fetched": len(incoming),
                "added": summary.added,
                "updated": summary.updated,
                "preserved": summary.preserved,
            },
        },
    )
    return SyncResult(
        source=document.url,
        username=user,
        fetched=len(incoming),
        added=summary.added,
        updated=summary.updated,
        preserved=summary.preserved,
        total=len(summary.records),
        last_sync=synced_at,
    )


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

_NULLABLE_SETTINGS = {"start_date", "last_sync"}


def get_settings(db: Session) -> UserSettings:
    row = db.get(UserSettings, SETTINGS_ROW_ID)
    if row is None:
        row = UserSettings(id=SETTINGS_ROW_ID, **DEFAULTS)
        db.add(row)
        db.commit()
        db.refresh(row)
    return row


def update_settings(db: Session, changes: dict[str, Any]) -> UserSettings:
    """Apply a flat partial update. None clears nullable fields and is ignored otherwise."""
    row = get_settings(db)
    for field, value in changes.items():
        if field not in DEFAULTS:
            continue
        if value is None and field not in _NULLABLE_SETTINGS:
            continue
        if field == "letterboxd_username":
            value = normalize_username(value)
        setattr(row, field, value)
    db.commit()
    db.refresh(row)
    return row


def reset_settings(db: Session) -> UserSettings:
    row = get_settings(db)
    for field, value in DEFAULTS.items():
        setattr(row, field, value)
    db.commit()
    db.refresh(row)
    return row
