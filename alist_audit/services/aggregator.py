"""
Aggregator — composes the three scope breakdowns with the derived
dashboard metrics.

Public API
----------
aggregate(records, settings, now) -> CalculatedStats

Every ratio below has an explicit empty-input branch; nothing here divides
by a value that can be zero.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from alist_audit.services.periods import Scope, same_iso_week, in_scope
from alist_audit.services.records import MembershipSettings, WatchRecord
from alist_audit.services.savings import PeriodBreakdown, compute_breakdown, flagged

WEEKLY_QUOTA = 4
MONTHLY_QUOTA = 12

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class CalculatedStats:
    lifetime: PeriodBreakdown
    monthly: PeriodBreakdown
    yearly: PeriodBreakdown
    avg_savings_per_movie: Decimal
    total_flagged_movies: int
    months_active: int
    weekly_free_used: int
    monthly_free_used: int
    utilization_rate: Decimal
    break_even_months: Optional[int]
    weekly_quota: int = WEEKLY_QUOTA
    monthly_quota: int = MONTHLY_QUOTA

    def for_scope(self, scope: Scope) -> PeriodBreakdown:
        if scope is Scope.lifetime:
            return self.lifetime
        if scope is Scope.year:
            return self.yearly
        return self.monthly


def break_even_months(
    lifetime: PeriodBreakdown,
    total_flagged: int,
    settings: MembershipSettings,
) -> Optional[int]:
    """
    Months at the current pace until lifetime ticket value covers lifetime
    cost. 0 when already profitable, None when it never will be (or when
    there is no pace to project from).
    """
    if not settings.is_active or total_flagged == 0:
        return None
    if lifetime.savings >= 0:
        return 0

    monthly_value = (
        Decimal(total_flagged) / Decimal(lifetime.active_months)
    ) * settings.avg_ticket_price
    delta = monthly_value - settings.subscription_cost
    if delta <= 0:
        return None
    return math.ceil(abs(lifetime.savings) / delta)


def aggregate(
    records: Sequence[WatchRecord],
    settings: MembershipSettings,
    now: date,
) -> CalculatedStats:
    lifetime = compute_breakdown(Scope.lifetime, records, settings, now)
    monthly = compute_breakdown(Scope.month, records, settings, now)
    yearly = compute_breakdown(Scope.year, records, settings, now)

    trips = flagged(records)
    total = len(trips)

    if total > 0:
        avg = (lifetime.savings / total).quantize(_CENTS, rounding=ROUND_HALF_UP)
    else:
        avg = Decimal("0")

    # Not capped at WEEKLY_QUOTA; the progress bar caps itself.
    weekly_used = sum(1 for r in trips if same_iso_week(r.watch_date, now))
    monthly_used = sum(1 for r in trips if in_scope(r.watch_date, Scope.month, now))

    utilization = min(
        Decimal(100),
        Decimal(monthly_used) / Decimal(MONTHLY_QUOTA) * 100,
    ).quantize(_CENTS, rounding=ROUND_HALF_UP)

    return CalculatedStats(
        lifetime=lifetime,
        monthly=monthly,
        yearly=yearly,
        avg_savings_per_movie=avg,
        total_flagged_movies=total,
        months_active=lifetime.active_months,
        weekly_free_used=weekly_used,
        monthly_free_used=monthly_used,
        utilization_rate=utilization,
        break_even_months=break_even_months(lifetime, total, settings),
    )
