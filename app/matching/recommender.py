"""Ranked, read-only recommendations built on the match score."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from app.core.errors import store_errors
from app.matching.config import MatchingPolicy
from app.matching.metrics import get_metrics
from app.matching.models import (
    EventDetails,
    EventRecommendation,
    VolunteerProfile,
    VolunteerRecommendation,
)
from app.matching.scorer import MatchScorer

if TYPE_CHECKING:
    from app.db.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def resolve_today(today: date | str | None = None) -> str:
    """ISO date string for "today", defaulting to the current local date."""
    if today is None:
        return date.today().isoformat()
    if isinstance(today, date):
        return today.isoformat()
    return today


class RecommendationEngine:
    """
    Suggests volunteers for an event and events for a volunteer.

    Pairs already linked by a blocking match (Matched or Completed) are
    left out, as is anything scoring 0. Results are ordered by score,
    highest first, then by ID ascending. Nothing is written.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        scorer: MatchScorer | None = None,
        policy: MatchingPolicy | None = None,
    ):
        self.uow = uow
        self.scorer = scorer or MatchScorer()
        self.policy = policy or MatchingPolicy()

    async def recommend_volunteers(self, event_id: str) -> list[VolunteerRecommendation]:
        """
        Rank volunteers for an event.

        Args:
            event_id: Event ID

        Returns:
            Ranked recommendations; empty if the event does not exist
        """
        with store_errors("recommend_volunteers", event_id=event_id):
            event_record = await self.uow.events.get_by_id(event_id)
            if event_record is None:
                logger.info(f"[RECOMMEND] Event {event_id} not found, no recommendations")
                return []

            blocking = await self.uow.matches.get_by_event(
                event_id, statuses=self.policy.blocking_values()
            )
            volunteer_records = await self.uow.volunteers.list_all()

        event = EventDetails.from_record(event_record)
        excluded = {m.volunteer_id for m in blocking}
        metrics = get_metrics()

        scored: list[VolunteerRecommendation] = []
        for record in volunteer_records:
            if record.id in excluded:
                continue
            volunteer = VolunteerProfile.from_record(record)
            score = self.scorer.score(volunteer, event)
            metrics.record_score(score)
            if score <= 0:
                continue
            scored.append(
                VolunteerRecommendation(
                    volunteer=volunteer,
                    event_id=event.id,
                    event_name=event.name,
                    match_score=score,
                )
            )

        ranked = self.scorer.rank(
            scored, score=lambda r: r.match_score, tie_key=lambda r: r.volunteer.id
        )
        logger.info(
            f"[RECOMMEND] Event {event_id}: {len(ranked)} volunteers recommended "
            f"({len(excluded)} already matched, {len(volunteer_records)} total)"
        )
        return ranked

    async def recommend_events(
        self, volunteer_id: str, today: date | str | None = None
    ) -> list[EventRecommendation]:
        """
        Rank upcoming active events for a volunteer.

        Args:
            volunteer_id: Volunteer ID
            today: Reference date for "upcoming" (defaults to the current date)

        Returns:
            Ranked recommendations; empty if the volunteer does not exist
        """
        today_iso = resolve_today(today)

        with store_errors("recommend_events", volunteer_id=volunteer_id):
            volunteer_record = await self.uow.volunteers.get_by_id(volunteer_id)
            if volunteer_record is None:
                logger.info(
                    f"[RECOMMEND] Volunteer {volunteer_id} not found, no recommendations"
                )
                return []

            blocking = await self.uow.matches.get_by_volunteer(
                volunteer_id, statuses=self.policy.blocking_values()
            )
            event_records = await self.uow.events.list_upcoming_active(
                today_iso, status=self.policy.eligible_event_status
            )

        volunteer = VolunteerProfile.from_record(volunteer_record)
        excluded = {m.event_id for m in blocking}
        metrics = get_metrics()

        scored: list[EventRecommendation] = []
        for record in event_records:
            if record.id in excluded:
                continue
            event = EventDetails.from_record(record)
            score = self.scorer.score(volunteer, event)
            metrics.record_score(score)
            if score <= 0:
                continue
            scored.append(
                EventRecommendation(
                    event=event,
                    volunteer_id=volunteer.id,
                    volunteer_name=volunteer.name,
                    match_score=score,
                )
            )

        ranked = self.scorer.rank(
            scored, score=lambda r: r.match_score, tie_key=lambda r: r.event.id
        )
        logger.info(
            f"[RECOMMEND] Volunteer {volunteer_id}: {len(ranked)} events recommended "
            f"(upcoming from {today_iso}, {len(excluded)} already matched)"
        )
        return ranked
