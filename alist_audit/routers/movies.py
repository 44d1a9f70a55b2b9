"""
Movies router — the curated watch list.

GET    /movies                 — list (filter + sort)
POST   /movies                 — add a movie by hand
GET    /movies/recent          — last 5 membership trips
POST   /movies/{id}/toggle     — flip the membership flag
PATCH  /movies/{id}/notes      — edit notes
POST   /movies/bulk-update     — set the flag on many movies
POST   /movies/bulk-delete     — delete many movies
DELETE /movies                 — clear all movies
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from alist_audit.db.base import get_db
from alist_audit.schemas.common import ErrorResponse
from alist_audit.schemas.movie import (
    BulkResult,
    BulkSelection,
    BulkUpdateRequest,
    ManualMovieRequest,
    MovieOut,
    NotesRequest,
)
from alist_audit.services import library
from alist_audit.services.library import ManualMovie, MovieFilter, MovieSort

router = APIRouter(prefix="/movies", tags=["movies"])


@router.get("", response_model=list[MovieOut], summary="List movies")
def list_movies(
    filter: MovieFilter = Query(default=MovieFilter.all, description="all | flagged | unflagged"),
    sort: MovieSort = Query(default=MovieSort.date, description="date | title | savings"),
    db: Session = Depends(get_db),
):
    """
    Newest first by default. `title` sorts alphabetically; `savings` puts
    membership-flagged movies first.
    """
    return library.list_movies(db, movie_filter=filter, sort=sort)


@router.post(
    "",
    response_model=MovieOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a movie manually",
    responses={
        201: {"description": "Movie stored with added_manually=true."},
        409: {"model": ErrorResponse, "description": "A movie with the supplied id already exists."},
    },
)
def add_movie(payload: ManualMovieRequest, db: Session = Depends(get_db)):
    return library.add_manual_movie(
        db,
        ManualMovie(
            title=payload.title,
            watch_date=payload.watch_date,
            counts_toward_membership=payload.counts_toward_membership,
            rating=payload.rating,
            notes=payload.notes,
            id=payload.id,
        ),
    )


@router.get("/recent", response_model=list[MovieOut], summary="Recent membership trips")
def recent(
    limit: int = Query(default=5, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return library.recent_activity(db, limit=limit)


@router.post(
    "/{movie_id}/toggle",
    response_model=MovieOut,
    summary="Flip the membership flag",
    responses={404: {"model": ErrorResponse, "description": "Movie not found."}},
)
def toggle(movie_id: str, db: Session = Depends(get_db)):
    return library.toggle_membership(db, movie_id)


@router.patch(
    "/{movie_id}/notes",
    response_model=MovieOut,
    summary="Edit notes",
    responses={404: {"model": ErrorResponse, "description": "Movie not found."}},
)
def edit_notes(movie_id: str, payload: NotesRequest, db: Session = Depends(get_db)):
    return library.set_notes(db, movie_id, payload.notes)


@router.post(
    "/bulk-update",
    response_model=BulkResult,
    summary="Set the membership flag on several movies",
    responses={422: {"model": ErrorResponse, "description": "No ids supplied."}},
)
def bulk_update(payload: BulkUpdateRequest, db: Session = Depends(get_db)):
    affected = library.bulk_update(db, payload.ids, payload.counts_toward_membership)
    return BulkResult(affected=affected)


@router.post(
    "/bulk-delete",
    response_model=BulkResult,
    summary="Delete several movies",
    responses={422: {"model": ErrorResponse, "description": "No ids supplied."}},
)
def bulk_delete(payload: BulkSelection, db: Session = Depends(get_db)):
    return BulkResult(affected=library.bulk_delete(db, payload.ids))


@router.delete("", response_model=BulkResult, summary="Delete every movie")
def clear(db: Session = Depends(get_db)):
    return BulkResult(affected=library.clear_movies(db))
