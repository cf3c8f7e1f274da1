"""Comparators between a volunteer's profile and an event's requirements."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from app.matching.models import EventDetails, VolunteerProfile


def skill_match(
    volunteer: VolunteerProfile, event: EventDetails
) -> tuple[Decimal, dict[str, Any]]:
    """
    Fraction of the event's required skills the volunteer has.

    Skill names are compared case-sensitively. An event that requires no
    skills puts no constraint on the volunteer and yields 1.

    Returns:
        Tuple of (fraction in [0, 1], details)
    """
    required = event.required_skills
    if not required:
        return Decimal(1), {"required": [], "matched": [], "match_type": "no_requirement"}

    held = set(volunteer.skills)
    matched = [skill for skill in required if skill in held]
    details = {
        "required": list(required),
        "matched": matched,
        "missing": [skill for skill in required if skill not in held],
        "match_type": "full" if len(matched) == len(required) else "partial" if matched else "none",
    }
    return Decimal(len(matched)) / Decimal(len(required)), details


def availability_match(
    volunteer: VolunteerProfile, event: EventDetails
) -> tuple[bool, dict[str, Any]]:
    """Whether the event's date is one of the volunteer's available dates."""
    available = event.date in volunteer.availability
    return available, {"event_date": event.date, "available": available}


def location_match(
    volunteer: VolunteerProfile, event: EventDetails
) -> tuple[bool, dict[str, Any]]:
    """Whether volunteer and event locations are the same string."""
    same = volunteer.location == event.location
    return same, {
        "volunteer_location": volunteer.location,
        "event_location": event.location,
        "same_location": same,
    }
