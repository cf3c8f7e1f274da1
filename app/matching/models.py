"""Data models for scoring, recommendations and match records."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from app.db.models import Event, Match, Volunteer


class MatchStatus(str, Enum):
    """Every status a match can hold."""

    PENDING = "Pending"
    MATCHED = "Matched"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]


Urgency = Literal["Low", "Medium", "High"]


def _dedupe(values: list[str]) -> list[str]:
    """Drop repeated entries, keeping first-seen order."""
    return list(dict.fromkeys(values))


class VolunteerPreferences(BaseModel):
    """Optional volunteer preferences. Not used by the score."""

    max_distance: int | None = Field(
        default=None, ge=0, description="Maximum travel distance in miles"
    )
    event_types: list[str] = Field(
        default_factory=list, description="Preferred event type tags"
    )


class VolunteerProfile(BaseModel):
    """Snapshot of a volunteer as seen by the matcher."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str | None = None
    location: str
    skills: list[str] = Field(default_factory=list)
    availability: list[str] = Field(
        default_factory=list, description="Available dates (YYYY-MM-DD)"
    )
    preferences: VolunteerPreferences | None = None

    @field_validator("skills", "availability")
    @classmethod
    def _unique(cls, v: list[str]) -> list[str]:
        return _dedupe(v)

    @classmethod
    def from_record(cls, volunteer: Volunteer) -> VolunteerProfile:
        preferences = None
        if volunteer.max_distance is not None or volunteer.preferred_event_types:
            preferences = VolunteerPreferences(
                max_distance=volunteer.max_distance,
                event_types=list(volunteer.preferred_event_types or []),
            )
        return cls(
            id=volunteer.id,
            name=volunteer.name,
            email=volunteer.email,
            location=volunteer.location,
            skills=list(volunteer.skills or []),
            availability=list(volunteer.availability or []),
            preferences=preferences,
        )


class EventDetails(BaseModel):
    """Snapshot of an event as seen by the matcher."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    date: str = Field(..., description="Event day (YYYY-MM-DD)")
    location: str
    required_skills: list[str] = Field(default_factory=list)
    urgency: Urgency = "Medium"
    status: str = "Active"

    @field_validator("required_skills")
    @classmethod
    def _unique(cls, v: list[str]) -> list[str]:
        return _dedupe(v)

    @classmethod
    def from_record(cls, event: Event) -> EventDetails:
        return cls(
            id=event.id,
            name=event.name,
            description=event.description,
            date=event.date,
            location=event.location,
            required_skills=list(event.required_skills or []),
            urgency=event.urgency,  # type: ignore[arg-type]
            status=event.status,
        )


class ComponentScore(BaseModel):
    """Points awarded by one score component."""

    component: str = Field(..., description="Component name")
    points: float = Field(..., ge=0.0, description="Points awarded")
    max_points: int = Field(..., description="Maximum points for this component")
    details: dict = Field(default_factory=dict)


class ScoreBreakdown(BaseModel):
    """A total score with the components that produced it."""

    volunteer_id: str | None = None
    event_id: str | None = None
    total: int = Field(..., ge=0, le=100)
    components: list[ComponentScore] = Field(default_factory=list)

    def get_summary(self) -> dict:
        return {
            "total": self.total,
            **{c.component: c.points for c in self.components},
        }


class VolunteerRecommendation(BaseModel):
    """A volunteer suggested for an event."""

    volunteer: VolunteerProfile
    event_id: str
    event_name: str
    match_score: int = Field(..., ge=0, le=100)


class EventRecommendation(BaseModel):
    """An event suggested for a volunteer."""

    event: EventDetails
    volunteer_id: str
    volunteer_name: str
    match_score: int = Field(..., ge=0, le=100)


class MatchRecord(BaseModel):
    """A persisted match."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    volunteer_id: str
    event_id: str
    status: MatchStatus
    match_score: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, match: Match) -> MatchRecord:
        return cls.model_validate(match)


class MatchHistoryEntry(BaseModel):
    """A match joined with the volunteer and event it links."""

    match_id: str
    volunteer_id: str
    volunteer_name: str
    event_id: str
    event_name: str
    event_date: str
    location: str
    urgency: str
    required_skills: list[str]
    status: MatchStatus
    match_score: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_records(
        cls, match: Match, volunteer: Volunteer, event: Event
    ) -> MatchHistoryEntry:
        return cls(
            match_id=match.id,
            volunteer_id=match.volunteer_id,
            volunteer_name=volunteer.name,
            event_id=match.event_id,
            event_name=event.name,
            event_date=event.date,
            location=event.location,
            urgency=event.urgency,
            required_skills=list(event.required_skills or []),
            status=MatchStatus(match.status),
            match_score=match.match_score,
            created_at=match.created_at,
            updated_at=match.updated_at,
        )


class AutoMatchResult(BaseModel):
    """Outcome of one auto-match run."""

    created: list[MatchRecord] = Field(
        default_factory=list, description="Matches created by this run"
    )

    # Per-volunteer outcomes
    volunteers_considered: int = 0
    skipped_at_capacity: int = 0
    no_candidates: int = 0
    below_threshold: int = 0

    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    def finalize(self) -> None:
        self.completed_at = datetime.now(timezone.utc)

    def get_summary(self) -> dict:
        """Get run summary."""
        return {
            "volunteers_considered": self.volunteers_considered,
            "matches_created": len(self.created),
            "skipped_at_capacity": self.skipped_at_capacity,
            "no_candidates": self.no_candidates,
            "below_threshold": self.below_threshold,
            "average_score": (
                sum(m.match_score for m in self.created) / len(self.created)
                if self.created
                else 0.0
            ),
            "duration_seconds": (
                (self.completed_at - self.started_at).total_seconds()
                if self.completed_at
                else None
            ),
        }
