"""
Sync router.

POST /sync — pull the Letterboxd RSS feed and reconcile it into the stored list.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from alist_audit.db.base import get_db
from alist_audit.schemas.common import ErrorResponse
from alist_audit.schemas.sync import SyncRequest, SyncResponse
from alist_audit.services import library

router = APIRouter(tags=["sync"])


@router.post(
    "/sync",
    response_model=SyncResponse,
    summary="Sync from Letterboxd",
    responses={
        200: {"description": "Feed fetched and merged."},
        400: {"model": ErrorResponse, "description": "No username given or saved."},
        502: {"model": ErrorResponse, "description": "Letterboxd returned a non-2xx status."},
        503: {"model": ErrorResponse, "description": "Letterboxd could not be reached."},
    },
)
def sync(payload: SyncRequest, db: Session = Depends(get_db)):
    """
    Feed content (title, date, rating) refreshes stored movies; the
    membership flag and notes you set are never overwritten. Movies missing
    from the feed page (older or manual entries) are kept.
    """
    result = library.sync_from_feed(db, username=payload.username)
    return SyncResponse(
        source=result.source,
        username=result.username,
        fetched=result.fetched,
        added=result.added,
        updated=result.updated,
        preserved=result.preserved,
        total=result.total,
        last_sync=result.last_sync,
    )
