"""
Export router.

GET /export/json — {settings, movies}
GET /export/csv  — title,watchDate,countsTowardMembership,rating,addedManually
"""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from alist_audit.db.base import get_db
from alist_audit.services import library
from alist_audit.services.export import export_csv, export_json

router = APIRouter(prefix="/export", tags=["export"])


@router.get("/json", summary="Full export")
def export_as_json(db: Session = Depends(get_db)):
    return export_json(library.get_settings(db), library.load_records(db))


@router.get("/csv", response_class=PlainTextResponse, summary="Tabular export")
def export_as_csv(db: Session = Depends(get_db)):
    return PlainTextResponse(
        export_csv(library.load_records(db)),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="alist-savings.csv"'},
    )
