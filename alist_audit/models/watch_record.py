from datetime import datetime, date
from sqlalchemy import Integer, String, Text, Boolean, Float, DateTime, Date, func
from sqlalchemy.orm import Mapped, mapped_column

from alist_audit.db.base import Base


class WatchRecordRow(Base):
    """One watched title, from the Letterboxd feed or entered by hand."""

    __tablename__ = "watch_records"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    watch_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    source_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # The only field the user curates; never inferred.
    counts_toward_membership: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    added_manually: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Preserves feed order across reads.
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
