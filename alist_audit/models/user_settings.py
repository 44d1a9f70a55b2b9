"""
UserSettings — the single persisted settings row (id = 1).

Columns are grouped the way the settings document is exported:
letterboxd.*, a_list.*, preferences.*. The row is created lazily with
defaults and never deleted; reset restores the defaults in place.
"""
from datetime import datetime, date
from decimal import Decimal
from sqlalchemy import Integer, String, Boolean, Numeric, DateTime, Date, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

from alist_audit.db.base import Base
from alist_audit.services.periods import Scope

SETTINGS_ROW_ID = 1

DEFAULTS = {
    "letterboxd_username": "",
    "last_sync": None,
    "subscription_cost": Decimal("23.95"),
    "start_date": None,
    "avg_ticket_price": Decimal("18.50"),
    "is_active": True,
    "default_view": Scope.lifetime,
    "currency": "USD",
    "notifications": True,
}


class UserSettings(Base):
    __tablename__ = "user_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # letterboxd
    letterboxd_username: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    last_sync: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # a_list
    subscription_cost: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=DEFAULTS["subscription_cost"]
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    avg_ticket_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=DEFAULTS["avg_ticket_price"]
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # preferences
    default_view: Mapped[str] = mapped_column(
        Enum(Scope, name="scope_enum"), nullable=False, default=Scope.lifetime
    )
    currency: Mapped[str] = mapped_column(String(8), nullable=False, default="USD")
    notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
