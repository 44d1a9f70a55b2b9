"""
Reconciler: merge freshly parsed feed records into the curated record set.

The feed is authoritative for factual content (title, date, source slug);
the user is authoritative for curation (membership flag, notes, manual
origin). Pure and total: never raises, never mutates its inputs.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from alist_audit.services.records import WatchRecord


@dataclass
class MergeSummary:
    records: list[WatchRecord]
    added: int
    updated: int
    preserved: int


def _merge_one(incoming: WatchRecord, existing: WatchRecord) -> WatchRecord:
    return replace(
        incoming,
        counts_toward_membership=existing.counts_toward_membership,
        added_manually=existing.added_manually,
        notes=existing.notes,
        rating=incoming.rating if incoming.rating is not None else existing.rating,
    )


def merge_with_summary(
    incoming: Iterable[WatchRecord],
    existing: Sequence[WatchRecord],
) -> MergeSummary:
    by_id = {record.id: record for record in existing}
    seen: set[str] = set()
    merged: list[WatchRecord] = []
    added = updated = 0

    for record in incoming:
        if record.id in seen:
            continue
        seen.add(record.id)
        previous = by_id.get(record.id)
        if previous is None:
            merged.append(record)
            added += 1
        else:
            merged.append(_merge_one(record, previous))
            updated += 1

    preserved = [record for record in existing if record.id not in seen]
    return MergeSummary(
        records=merged + preserved,
        added=added,
        updated=updated,
        preserved=len(preserved),
    )


def merge_records(
    incoming: Iterable[WatchRecord],
    existing: Sequence[WatchRecord],
) -> list[WatchRecord]:
    """Merged/updated records in feed order, then untouched existing ones."""
    return merge_with_summary(incoming, existing).records
