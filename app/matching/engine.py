"""Matching engine: the operations exposed to the HTTP boundary and the CLI."""

from __future__ import annotations

import logging
from datetime import date

from app.core.config import get_settings
from app.db.unit_of_work import UnitOfWork
from app.matching.automatcher import AutoMatcher
from app.matching.config import MatchingPolicy
from app.matching.lifecycle import MatchLifecycleManager
from app.matching.models import (
    AutoMatchResult,
    EventRecommendation,
    MatchHistoryEntry,
    MatchRecord,
    ScoreBreakdown,
    VolunteerRecommendation,
)
from app.matching.notifications import (
    DatabaseNotificationSink,
    LoggingNotificationSink,
    NotificationSink,
)
from app.matching.recommender import RecommendationEngine
from app.matching.scorer import MatchScorer

logger = logging.getLogger(__name__)


class MatchingEngine:
    """
    Volunteer/event matching over one unit of work.

    Composes:
    1. Scoring (``MatchScorer``)
    2. Recommendations (``RecommendationEngine``)
    3. Match lifecycle (``MatchLifecycleManager``)
    4. Batch auto-matching (``AutoMatcher``)

    The engine does not commit; the caller's ``UnitOfWork`` does.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        policy: MatchingPolicy | None = None,
        notifier: NotificationSink | None = None,
        debug: bool | None = None,
    ):
        """
        Initialize matching engine.

        Args:
            uow: Open unit of work providing the repositories
            policy: Matching policy (defaults to the standard thresholds)
            notifier: Notification sink (defaults per NOTIFICATIONS_PERSIST)
            debug: Log per-component score breakdowns (defaults to settings.DEBUG)
        """
        settings = get_settings()
        self.uow = uow
        self.policy = policy or MatchingPolicy()
        self.scorer = MatchScorer(debug=settings.DEBUG if debug is None else debug)

        if notifier is None:
            notifier = (
                DatabaseNotificationSink(uow.notifications)
                if settings.NOTIFICATIONS_PERSIST
                else LoggingNotificationSink()
            )
        self.notifier = notifier

        self.recommender = RecommendationEngine(uow, self.scorer, self.policy)
        self.lifecycle = MatchLifecycleManager(
            uow, self.scorer, self.notifier, self.policy
        )
        self.auto_matcher = AutoMatcher(uow, self.lifecycle, self.scorer, self.policy)

    # Scoring

    async def calculate_score(self, volunteer_id: str, event_id: str) -> ScoreBreakdown:
        return await self.lifecycle.calculate_score(volunteer_id, event_id)

    # Recommendations

    async def recommend_volunteers(self, event_id: str) -> list[VolunteerRecommendation]:
        return await self.recommender.recommend_volunteers(event_id)

    async def recommend_events(
        self, volunteer_id: str, today: date | str | None = None
    ) -> list[EventRecommendation]:
        return await self.recommender.recommend_events(volunteer_id, today)

    # Lifecycle

    async def create_match(self, volunteer_id: str, event_id: str) -> MatchRecord:
        return await self.lifecycle.create_match(volunteer_id, event_id)

    async def update_match_status(self, match_id: str, status: str) -> MatchRecord:
        return await self.lifecycle.update_match_status(match_id, status)

    async def delete_match(self, match_id: str) -> None:
        await self.lifecycle.delete_match(match_id)

    async def list_matches(self) -> list[MatchRecord]:
        return await self.lifecycle.list_matches()

    async def get_match(self, match_id: str) -> MatchRecord:
        return await self.lifecycle.get_match(match_id)

    async def get_match_history(self) -> list[MatchHistoryEntry]:
        return await self.lifecycle.get_match_history()

    # Batch

    async def auto_match_all(self, today: date | str | None = None) -> AutoMatchResult:
        return await self.auto_matcher.auto_match_all(today)


# Convenience functions
async def auto_match_all(
    today: date | str | None = None,
    policy: MatchingPolicy | None = None,
) -> AutoMatchResult:
    """
    Run one auto-match pass in its own transaction.

    Args:
        today: Reference date for "upcoming" events
        policy: Matching policy

    Returns:
        Auto-match result (committed)
    """
    async with UnitOfWork() as uow:
        engine = MatchingEngine(uow, policy)
        return await engine.auto_match_all(today)
