"""
Period windowing for the three savings scopes.

Month counting is by (year, month) component difference, not elapsed
days: a mid-month start is billed as a full month.
"""
from __future__ import annotations

import enum
from datetime import date
from typing import Optional


class Scope(str, enum.Enum):
    lifetime = "lifetime"
    year = "year"
    month = "month"


def window_start(scope: Scope, membership_start: Optional[date], now: date) -> date:
    floor = membership_start or now

    if scope is Scope.lifetime:
        return floor
    if scope is Scope.year:
        return max(date(now.year, 1, 1), floor)
    if scope is Scope.month:
        return max(date(now.year, now.month, 1), floor)
    raise ValueError(f"unknown scope: {scope!r}")


def calendar_month_span(start: date, end: date) -> int:
    """Whole calendar months from start to end, both ends inclusive."""
    return (end.year - start.year) * 12 + (end.month - start.month) + 1


def active_months(start: date, now: date, is_active: bool) -> int:
    if not is_active:
        return 0
    # Never below 1 so downstream per-month rates can't divide by zero.
    return max(1, calendar_month_span(start, now))


def in_scope(watch_date: date, scope: Scope, now: date) -> bool:
    """Calendar filter applied to trips: same year / same month as `now`."""
    if scope is Scope.lifetime:
        return True
    if scope is Scope.year:
        return watch_date.year == now.year
    if scope is Scope.month:
        return (watch_date.year, watch_date.month) == (now.year, now.month)
    raise ValueError(f"unknown scope: {scope!r}")


def same_iso_week(a: date, b: date) -> bool:
    """Monday-start week comparison."""
    return a.isocalendar()[:2] == b.isocalendar()[:2]
