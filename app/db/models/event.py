"""Event model for volunteer opportunities."""

import uuid
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import JSON, String, Text, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Event(Base):
    """
    A single-day volunteer event created by an administrator.

    Only ``Active`` events dated today or later are offered to volunteers
    by the recommender and the auto-matcher.
    """

    __tablename__ = "events"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    # Event details
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date: Mapped[str] = mapped_column(
        String(10), nullable=False, index=True,
        comment="Event day as ISO YYYY-MM-DD"
    )
    location: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True,
        comment="Free-text location, compared by exact match"
    )
    required_skills: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list,
        comment="Skill names a volunteer needs for this event"
    )
    urgency: Mapped[str] = mapped_column(
        String(10), nullable=False, default="Medium",
        comment="Urgency ('Low', 'Medium', 'High')"
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="Active", index=True,
        comment="Event status ('Active' or a terminal state such as 'Completed')"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        Index("idx_event_status_date", "status", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Event(id={self.id}, name={self.name}, date={self.date}, "
            f"status={self.status})>"
        )
