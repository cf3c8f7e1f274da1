"""Notification model for messages addressed to volunteers."""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import String, Text, DateTime, Integer, Boolean, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Notification(Base):
    """
    Stores notifications emitted by the match lifecycle.

    Delivery (email, push) is handled elsewhere; this table is the record
    a volunteer's inbox reads from.
    """

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    volunteer_id: Mapped[str] = mapped_column(
        String(36), nullable=False, index=True,
        comment="Recipient volunteer"
    )
    kind: Mapped[str] = mapped_column(
        String(50), nullable=False,
        comment="Notification kind ('match_created', 'status_changed', 'match_removed')"
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)

    # Related entities (no foreign keys: a removal notice outlives its match)
    event_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    match_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True
    )

    __table_args__ = (
        Index("idx_notification_volunteer_created", "volunteer_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Notification(id={self.id}, volunteer_id={self.volunteer_id}, "
            f"kind={self.kind})>"
        )
