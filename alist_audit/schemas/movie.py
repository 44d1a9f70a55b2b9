"""
Movie request / response schemas.

GET    /movies               → list[MovieOut]
POST   /movies               → ManualMovieRequest → MovieOut
PATCH  /movies/{id}/notes    → NotesRequest → MovieOut
POST   /movies/bulk-update   → BulkUpdateRequest → BulkResult
POST   /movies/bulk-delete   → BulkSelection → BulkResult
"""
from __future__ import annotations

from datetime import date
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MovieOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    watch_date: date
    source_id: Optional[str] = None
    counts_toward_membership: bool
    rating: Optional[float] = None
    added_manually: bool
    notes: Optional[str] = None


class ManualMovieRequest(BaseModel):
    """A movie entered by hand (not from the Letterboxd feed)."""

    title: Annotated[str, Field(
        min_length=1,
        max_length=500,
        description="Film title. Stripped of leading/trailing whitespace.",
        examples=["Anora"],
    )]
    watch_date: date = Field(
        default_factory=date.today,
        description="Day the film was watched. Defaults to today.",
        examples=["2025-01-16"],
    )
    counts_toward_membership: bool = Field(
        default=True,
        description="Whether the screening used the membership benefit.",
    )
    rating: Optional[float] = Field(default=None, ge=0, le=5, allow_inf_nan=False, examples=[4.5])
    notes: Optional[str] = Field(default=None, max_length=2_000, examples=["Date night"])
    id: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Caller-supplied id. Generated when omitted.",
    )

    @field_validator("title", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("title must not be empty after stripping whitespace")
        return stripped


class NotesRequest(BaseModel):
    notes: Optional[str] = Field(default=None, max_length=2_000)


class BulkSelection(BaseModel):
    ids: list[str] = Field(description="Movie ids to act on.")


class BulkUpdateRequest(BulkSelection):
    counts_toward_membership: bool


class BulkResult(BaseModel):
    affected: int = Field(description="Number of stored movies changed.")
