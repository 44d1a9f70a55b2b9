"""
Settings schemas, nested the same way the settings document is stored
and exported: letterboxd / a_list / preferences.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from alist_audit.services.periods import Scope


class LetterboxdSettings(BaseModel):
    username: str
    last_sync: Optional[datetime] = None


class AListSettings(BaseModel):
    subscription_cost: float
    start_date: Optional[date] = None
    avg_ticket_price: float
    is_active: bool


class Preferences(BaseModel):
    default_view: Scope
    currency: Literal["USD"]
    notifications: bool


class SettingsOut(BaseModel):
    letterboxd: LetterboxdSettings
    a_list: AListSettings
    preferences: Preferences


# --- partial update ---------------------------------------------------------

class LetterboxdPatch(BaseModel):
    username: Optional[str] = Field(default=None, max_length=64, examples=["@cinefan"])


class AListPatch(BaseModel):
    subscription_cost: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False, examples=[23.95])
    start_date: Optional[date] = Field(default=None, examples=["2024-04-15"])
    avg_ticket_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False, examples=[18.5])
    is_active: Optional[bool] = None


class PreferencesPatch(BaseModel):
    default_view: Optional[Scope] = None
    currency: Optional[Literal["USD"]] = None
    notifications: Optional[bool] = None


class SettingsPatch(BaseModel):
    """Any subset of fields; omitted fields are left unchanged."""
    letterboxd: Optional[LetterboxdPatch] = None
    a_list: Optional[AListPatch] = None
    preferences: Optional[PreferencesPatch] = None

    def flatten(self) -> dict[str, Any]:
        """Explicitly-set fields as column name → value."""
        changes: dict[str, Any] = {}
        if self.letterboxd is not None:
            for key, value in self.letterboxd.model_dump(exclude_unset=True).items():
                changes[f"letterboxd_{key}"] = value
        if self.a_list is not None:
            changes.update(self.a_list.model_dump(exclude_unset=True))
        if self.preferences is not None:
            changes.update(self.preferences.model_dump(exclude_unset=True))
        return changes
