"""
Stats response schemas.

GET /stats          → StatsResponse
GET /stats/{scope}  → BreakdownOut
"""
from typing import Optional
from pydantic import BaseModel, Field

from alist_audit.services.periods import Scope


class BreakdownOut(BaseModel):
    scope: Scope
    window_start: str = Field(description="First day counted for subscription cost.")
    savings: float = Field(description="Ticket value minus subscription paid. 0 when inactive.")
    active_months: int = Field(description="Billed months in the window; 0 when inactive.")
    trip_count: int = Field(description="Membership-flagged movies in the window.")
    ticket_value: float = Field(description="trip_count × average ticket price.")


class StatsResponse(BaseModel):
    today: str = Field(description="The date the stats were computed for.")
    lifetime: BreakdownOut
    monthly: BreakdownOut
    yearly: BreakdownOut
    avg_savings_per_movie: float = Field(description="Lifetime savings per flagged movie; 0 if none.")
    total_flagged_movies: int
    months_active: int = Field(description="Lifetime active months.")
    weekly_free_used: int = Field(description="Flagged movies this ISO week (Monday start). Not capped.")
    weekly_quota: int
    monthly_free_used: int
    monthly_quota: int
    utilization_rate: float = Field(description="monthly_free_used / monthly_quota as a percentage, max 100.")
    break_even_months: Optional[int] = Field(
        default=None,
        description="Months until break-even at the current pace. 0 = already profitable, null = never / inactive.",
    )
