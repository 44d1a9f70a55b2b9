"""
Savings engine: one PeriodBreakdown per scope.

compute_breakdown(scope, records, settings, now) -> PeriodBreakdown

savings = ticket value received - subscription paid over the scope's
active window. An inactive membership reports zero cost and zero savings;
trip counts are still reported.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from alist_audit.services.periods import Scope, active_months, in_scope, window_start
from alist_audit.services.records import MembershipSettings, WatchRecord


@dataclass(frozen=True)
class PeriodBreakdown:
    scope: Scope
    window_start: date
    savings: Decimal
    active_months: int
    trip_count: int
    ticket_value: Decimal


def flagged(records: Iterable[WatchRecord]) -> list[WatchRecord]:
    return [r for r in records if r.counts_toward_membership]


def compute_breakdown(
    scope: Scope,
    records: Iterable[WatchRecord],
    settings: MembershipSettings,
    now: date,
) -> PeriodBreakdown:
    trips = [r for r in flagged(records) if in_scope(r.watch_date, scope, now)]

    trip_count = len(trips)
    ticket_value = trip_count * settings.avg_ticket_price

    start = window_start(scope, settings.start_date, now)
    months = active_months(start, now, settings.is_active)

    if settings.is_active:
        burn = months * settings.subscription_cost
        savings = ticket_value - burn
    else:
        savings = Decimal("0")

    return PeriodBreakdown(
        scope=scope,
        window_start=start,
        savings=savings,
        active_months=months,
        trip_count=trip_count,
        ticket_value=ticket_value,
    )
