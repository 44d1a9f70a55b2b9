"""
Stats router — savings, utilization and break-even.

GET /stats            — all three scopes + derived metrics
GET /stats/{scope}    — one scope's breakdown

Recomputed from the stored movies + settings on every call.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from alist_audit.db.base import get_db
from alist_audit.schemas.stats import BreakdownOut, StatsResponse
from alist_audit.services import library
from alist_audit.services.aggregator import CalculatedStats, aggregate
from alist_audit.services.periods import Scope
from alist_audit.services.savings import PeriodBreakdown, compute_breakdown

router = APIRouter(prefix="/stats", tags=["stats"])


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def _money(value: Decimal) -> float:
    return float(value.quantize(Decimal("0.01")))


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _breakdown_to_response(b: PeriodBreakdown) -> BreakdownOut:
    return BreakdownOut(
        scope=b.scope,
        window_start=str(b.window_start),
        savings=_money(b.savings),
        active_months=b.active_months,
        trip_count=b.trip_count,
        ticket_value=_money(b.ticket_value),
    )


def _stats_to_response(today: date, s: CalculatedStats) -> StatsResponse:
    return StatsResponse(
        today=str(today),
        lifetime=_breakdown_to_response(s.lifetime),
        monthly=_breakdown_to_response(s.monthly),
        yearly=_breakdown_to_response(s.yearly),
        avg_savings_per_movie=_money(s.avg_savings_per_movie),
        total_flagged_movies=s.total_flagged_movies,
        months_active=s.months_active,
        weekly_free_used=s.weekly_free_used,
        weekly_quota=s.weekly_quota,
        monthly_free_used=s.monthly_free_used,
        monthly_quota=s.monthly_quota,
        utilization_rate=float(s.utilization_rate),
        break_even_months=s.break_even_months,
    )


@router.get("", response_model=StatsResponse, summary="Savings dashboard")
def stats(
    today: Optional[date] = Query(
        default=None,
        description="Compute as of this date. Defaults to today (UTC).",
        examples=["2025-01-20"],
    ),
    db: Session = Depends(get_db),
):
    now = today or _today()
    records = library.load_records(db)
    membership = library.to_membership_settings(library.get_settings(db))
    return _stats_to_response(now, aggregate(records, membership, now))


@router.get("/{scope}", response_model=BreakdownOut, summary="One scope's breakdown")
def stats_for_scope(
    scope: Scope,
    today: Optional[date] = Query(
        default=None,
        description="Compute as of this date. Defaults to today (UTC).",
        examples=["2025-01-20"],
    ),
    db: Session = Depends(get_db),
):
    now = today or _today()
    records = library.load_records(db)
    membership = library.to_membership_settings(library.get_settings(db))
    return _breakdown_to_response(compute_breakdown(scope, records, membership, now))
