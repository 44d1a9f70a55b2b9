"""
Value types consumed by the calculation engine.

Plain frozen dataclasses: the engine never sees ORM rows, so a stored
record can't be mutated by a stats read.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class WatchRecord:
    id: str
    title: str
    watch_date: date
    source_id: Optional[str] = None
    counts_toward_membership: bool = False
    rating: Optional[float] = None
    added_manually: bool = False
    notes: Optional[str] = None


@dataclass(frozen=True)
class MembershipSettings:
    subscription_cost: Decimal = Decimal("23.95")
    start_date: Optional[date] = None
    avg_ticket_price: Decimal = Decimal("18.50")
    is_active: bool = True
