"""
Settings router.

GET   /settings
PATCH /settings
POST  /settings/reset
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from alist_audit.db.base import get_db
from alist_audit.models.user_settings import UserSettings
from alist_audit.schemas.settings import (
    AListSettings,
    LetterboxdSettings,
    Preferences,
    SettingsOut,
    SettingsPatch,
)
from alist_audit.services import library

router = APIRouter(prefix="/settings", tags=["settings"])


def _settings_to_response(row: UserSettings) -> SettingsOut:
    return SettingsOut(
        letterboxd=LetterboxdSettings(
            username=row.letterboxd_username,
            last_sync=row.last_sync,
        ),
        a_list=AListSettings(
            subscription_cost=float(row.subscription_cost),
            start_date=row.start_date,
            avg_ticket_price=float(row.avg_ticket_price),
            is_active=row.is_active,
        ),
        preferences=Preferences(
            default_view=row.default_view,
            currency=row.currency,
            notifications=row.notifications,
        ),
    )


@router.get("", response_model=SettingsOut, summary="Current settings")
def read_settings(db: Session = Depends(get_db)):
    return _settings_to_response(library.get_settings(db))


@router.patch("", response_model=SettingsOut, summary="Update any subset of settings")
def patch_settings(payload: SettingsPatch, db: Session = Depends(get_db)):
    """
    Omitted fields are unchanged. `a_list.start_date: null` clears the start
    date (window math then treats the membership as starting today).
    Negative amounts are rejected with 422.
    """
    return _settings_to_response(library.update_settings(db, payload.flatten()))


@router.post("/reset", response_model=SettingsOut, summary="Restore default settings")
def reset(db: Session = Depends(get_db)):
    return _settings_to_response(library.reset_settings(db))
