"""Volunteer profile model."""

import uuid
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import JSON, String, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Volunteer(Base):
    """
    A registered volunteer with the attributes the matcher compares.

    Skills and availability are stored as JSON arrays of strings; dates are
    ISO ``YYYY-MM-DD`` strings and are compared by exact equality.
    """

    __tablename__ = "volunteers"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    # Profile
    name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="Display name"
    )
    email: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, unique=True, index=True,
        comment="Contact email (credentials live with the auth collaborator)"
    )
    location: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True,
        comment="Free-text location, compared by exact match"
    )

    # Matching attributes
    skills: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list,
        comment="Ordered, de-duplicated skill names"
    )
    availability: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list,
        comment="Available dates as ISO YYYY-MM-DD strings"
    )

    # Preferences
    max_distance: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True,
        comment="Maximum travel distance in miles"
    )
    preferred_event_types: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list,
        comment="Preferred event type tags"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self) -> str:
        return (
            f"<Volunteer(id={self.id}, name={self.name}, "
            f"location={self.location}, skills={self.skills})>"
        )
