"""Volunteer/event compatibility scoring and ranking."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Sequence, TypeVar

from app.matching.models import (
    ComponentScore,
    EventDetails,
    ScoreBreakdown,
    VolunteerProfile,
)
from app.matching import rules

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MatchScorer:
    """
    Scores a volunteer against an event on a 0-100 scale.

    Points:
        skills        60 x (required skills held / required skills)
        availability  30 if the event date is an available date
        location      10 if the locations are the same string

    The weights are fixed: the recommendation order and the auto-match
    threshold are calibrated against them.
    """

    SKILL_POINTS = 60
    AVAILABILITY_POINTS = 30
    LOCATION_POINTS = 10

    def __init__(self, debug: bool = False):
        self.debug = debug

    def score_breakdown(
        self, volunteer: VolunteerProfile | None, event: EventDetails | None
    ) -> ScoreBreakdown:
        """
        Score a volunteer against an event, keeping each component.

        Args:
            volunteer: Volunteer snapshot (None scores 0)
            event: Event snapshot (None scores 0)

        Returns:
            Score breakdown with the rounded total
        """
        if volunteer is None or event is None:
            return ScoreBreakdown(
                volunteer_id=volunteer.id if volunteer else None,
                event_id=event.id if event else None,
                total=0,
            )

        fraction, skill_details = rules.skill_match(volunteer, event)
        skill_points = fraction * self.SKILL_POINTS

        available, availability_details = rules.availability_match(volunteer, event)
        availability_points = self.AVAILABILITY_POINTS if available else 0

        same_location, location_details = rules.location_match(volunteer, event)
        location_points = self.LOCATION_POINTS if same_location else 0

        raw = skill_points + availability_points + location_points
        total = int(raw.quantize(Decimal(1), rounding=ROUND_HALF_UP))

        breakdown = ScoreBreakdown(
            volunteer_id=volunteer.id,
            event_id=event.id,
            total=total,
            components=[
                ComponentScore(
                    component="skills",
                    points=float(skill_points),
                    max_points=self.SKILL_POINTS,
                    details=skill_details,
                ),
                ComponentScore(
                    component="availability",
                    points=availability_points,
                    max_points=self.AVAILABILITY_POINTS,
                    details=availability_details,
                ),
                ComponentScore(
                    component="location",
                    points=location_points,
                    max_points=self.LOCATION_POINTS,
                    details=location_details,
                ),
            ],
        )

        if self.debug:
            logger.debug(
                f"[SCORE] {volunteer.id} x {event.id} = {total} "
                f"{breakdown.get_summary()}"
            )

        return breakdown

    def score(
        self, volunteer: VolunteerProfile | None, event: EventDetails | None
    ) -> int:
        """Score a volunteer against an event (0-100)."""
        return self.score_breakdown(volunteer, event).total

    @staticmethod
    def rank(
        items: Sequence[T],
        score: Callable[[T], int],
        tie_key: Callable[[T], str],
    ) -> list[T]:
        """
        Order items by score, highest first.

        Equal scores are ordered by ``tie_key`` ascending so repeated
        calls over the same data return the same list.
        """
        return sorted(items, key=lambda item: (-score(item), tie_key(item)))


def calculate_match_score(
    volunteer: VolunteerProfile | None, event: EventDetails | None
) -> int:
    """Convenience function to score a single pair."""
    return MatchScorer().score(volunteer, event)
