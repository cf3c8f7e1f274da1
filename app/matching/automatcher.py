"""Batch auto-matching of volunteers to upcoming events."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from app.core.errors import store_errors
from app.matching.config import MatchingPolicy
from app.matching.lifecycle import MatchLifecycleManager, mutation_lock
from app.matching.metrics import get_metrics
from app.matching.models import AutoMatchResult, EventDetails, VolunteerProfile
from app.matching.recommender import resolve_today
from app.matching.scorer import MatchScorer

if TYPE_CHECKING:
    from app.db.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AutoMatcher:
    """
    Pairs each volunteer with their single best upcoming event.

    Per volunteer, in ID order:
    1. Skip when they already hold ``max_open_matches`` open matches
    2. Candidates are open events not yet matched with them (any status)
    3. Take the highest score; the first candidate (ID order) wins ties
    4. Create a Pending match when the score reaches the threshold

    All pairs are chosen before any match is written.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        lifecycle: MatchLifecycleManager,
        scorer: MatchScorer | None = None,
        policy: MatchingPolicy | None = None,
    ):
        self.uow = uow
        self.lifecycle = lifecycle
        self.scorer = scorer or lifecycle.scorer
        self.policy = policy or lifecycle.policy

    async def auto_match_all(self, today: date | str | None = None) -> AutoMatchResult:
        """
        Run one auto-match pass.

        Args:
            today: Reference date for "upcoming" (defaults to the current date)

        Returns:
            Run result; ``created`` holds only the matches made by this run
        """
        today_iso = resolve_today(today)
        result = AutoMatchResult()
        open_statuses = set(self.policy.open_values())

        logger.info(f"[AUTO-MATCH] Starting auto-match run (events from {today_iso})")

        async with mutation_lock():
            with store_errors("auto_match_all"):
                volunteers = await self.uow.volunteers.list_all()
                events = [
                    EventDetails.from_record(e)
                    for e in await self.uow.events.list_upcoming_active(
                        today_iso, status=self.policy.eligible_event_status
                    )
                ]

                planned: list[tuple[VolunteerProfile, EventDetails, int]] = []
                for record in volunteers:
                    result.volunteers_considered += 1
                    matches = await self.uow.matches.get_by_volunteer(record.id)

                    open_count = sum(1 for m in matches if m.status in open_statuses)
                    if open_count >= self.policy.max_open_matches:
                        result.skipped_at_capacity += 1
                        logger.debug(
                            f"[AUTO-MATCH] {record.id}: skipped, {open_count} open matches"
                        )
                        continue

                    matched_event_ids = {m.event_id for m in matches}
                    candidates = [e for e in events if e.id not in matched_event_ids]
                    if not candidates:
                        result.no_candidates += 1
                        continue

                    volunteer = VolunteerProfile.from_record(record)
                    best_event, best_score = self._best_candidate(volunteer, candidates)

                    if best_score < self.policy.auto_match_threshold:
                        result.below_threshold += 1
                        logger.debug(
                            f"[AUTO-MATCH] {record.id}: best {best_event.id} scored "
                            f"{best_score}, below {self.policy.auto_match_threshold}"
                        )
                        continue

                    planned.append((volunteer, best_event, best_score))

            for volunteer, event, score in planned:
                record = await self.lifecycle.insert_match(
                    volunteer, event, self.policy.auto_match_status, score
                )
                result.created.append(record)
                logger.info(
                    f"[AUTO-MATCH] {volunteer.id} -> {event.id} | Score: {score}"
                )

        result.finalize()
        get_metrics().record_auto_match(result)

        logger.info(f"[AUTO-MATCH] ✓ Run complete: {result.get_summary()}")
        return result

    def _best_candidate(
        self, volunteer: VolunteerProfile, candidates: list[EventDetails]
    ) -> tuple[EventDetails, int]:
        """Highest-scoring candidate; earlier candidates win ties."""
        best_event = candidates[0]
        best_score = -1
        metrics = get_metrics()
        for event in candidates:
            score = self.scorer.score(volunteer, event)
            metrics.record_score(score)
            if score > best_score:
                best_event, best_score = event, score
        return best_event, best_score
