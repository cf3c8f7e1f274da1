"""Match model linking volunteers to events with a compatibility score."""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Integer, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Match(Base):
    """
    Links one volunteer to one event.

    At most one row exists per (volunteer_id, event_id); the unique
    constraint backs the check the lifecycle manager performs before insert.
    """

    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    # Foreign keys
    volunteer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("volunteers.id", ondelete="CASCADE"), nullable=False, index=True,
        comment="Reference to the volunteer"
    )
    event_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True,
        comment="Reference to the event"
    )

    # Match state
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="Pending", index=True,
        comment="Match status ('Pending', 'Matched', 'Completed', 'Cancelled')"
    )
    match_score: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
        comment="Compatibility score (0-100) at creation time"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        UniqueConstraint("volunteer_id", "event_id", name="uq_match_volunteer_event"),
        Index("idx_match_volunteer_status", "volunteer_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Match(id={self.id}, volunteer_id={self.volunteer_id}, "
            f"event_id={self.event_id}, status={self.status}, "
            f"match_score={self.match_score})>"
        )
