"""
Export: full JSON document and fixed-column CSV.

The CSV is informational only (never re-ingested), so the only escaping
is replacing commas in titles with spaces.
"""
from __future__ import annotations

from typing import Iterable, Optional

from alist_audit.models.user_settings import UserSettings
from alist_audit.services.records import WatchRecord

CSV_COLUMNS = ("title", "watchDate", "countsTowardMembership", "rating", "addedManually")


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _rating(value: Optional[float]) -> str:
    if value is None:
        return ""
    return f"{value:g}"


def settings_document(row: UserSettings) -> dict:
    """The persisted settings shape, with stable camelCase field names."""
    return {
        "letterboxd": {
            "username": row.letterboxd_username,
            "lastSync": row.last_sync.isoformat() if row.last_sync else None,
        },
        "aList": {
            "subscriptionCost": float(row.subscription_cost),
            "startDate": row.start_date.isoformat() if row.start_date else None,
            "avgTicketPrice": float(row.avg_ticket_price),
            "isActive": row.is_active,
        },
        "preferences": {
            "defaultView": getattr(row.default_view, "value", row.default_view),
            "currency": row.currency,
            "notifications": row.notifications,
        },
    }


def record_document(record: WatchRecord) -> dict:
    return {
        "id": record.id,
        "title": record.title,
        "watchDate": record.watch_date.isoformat(),
        "sourceId": record.source_id,
        "countsTowardMembership": record.counts_toward_membership,
        "rating": record.rating,
        "addedManually": record.added_manually,
        "notes": record.notes,
    }


def export_json(row: UserSettings, records: Iterable[WatchRecord]) -> dict:
    return {
        "settings": settings_document(row),
        "movies": [record_document(r) for r in records],
    }


def export_csv(records: Iterable[WatchRecord]) -> str:
    lines = [",".join(CSV_COLUMNS)]
    for r in records:
        lines.append(",".join([
            r.title.replace(",", " "),
            r.watch_date.isoformat(),
            _bool(r.counts_toward_membership),
            _rating(r.rating),
            _bool(r.added_manually),
        ]))
    return "\n".join(lines)
