"""Match lifecycle: creation, status transitions, deletion and history."""

from __future__ import annotations

import asyncio
import logging
import weakref
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError

from app.core.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    store_errors,
)
from app.matching.config import MatchingPolicy
from app.matching.metrics import get_metrics
from app.matching.models import (
    EventDetails,
    MatchHistoryEntry,
    MatchRecord,
    MatchStatus,
    ScoreBreakdown,
    VolunteerProfile,
)
from app.matching.notifications import (
    LoggingNotificationSink,
    NotificationKind,
    NotificationSink,
)
from app.matching.scorer import MatchScorer

if TYPE_CHECKING:
    from app.db.models import Event, Volunteer
    from app.db.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS: dict[MatchStatus, frozenset[MatchStatus]] = {
    MatchStatus.PENDING: frozenset({MatchStatus.MATCHED, MatchStatus.CANCELLED}),
    MatchStatus.MATCHED: frozenset({MatchStatus.COMPLETED, MatchStatus.CANCELLED}),
    MatchStatus.COMPLETED: frozenset(),
    MatchStatus.CANCELLED: frozenset(),
}

_mutation_locks: weakref.WeakKeyDictionary[
    asyncio.AbstractEventLoop, asyncio.Lock
] = weakref.WeakKeyDictionary()


def mutation_lock() -> asyncio.Lock:
    """Process-wide lock serializing check-then-insert on matches.

    One lock per event loop; the unique constraint still guards writers in
    other processes.
    """
    loop = asyncio.get_running_loop()
    lock = _mutation_locks.get(loop)
    if lock is None:
        lock = _mutation_locks[loop] = asyncio.Lock()
    return lock


def parse_status(value: str) -> MatchStatus:
    """Convert a raw status value, rejecting anything outside the four statuses."""
    try:
        return MatchStatus(value)
    except ValueError:
        raise InvalidInputError(
            "Invalid status value",
            status=value,
            allowed=MatchStatus.values(),
        ) from None


def check_transition(current: MatchStatus, new: MatchStatus) -> None:
    """
    Validate a status change.

    Re-applying the current status is allowed. Terminal statuses
    (Completed, Cancelled) accept no other status.

    Raises:
        InvalidInputError: if the transition is not allowed
    """
    if current == new or new in ALLOWED_TRANSITIONS[current]:
        return
    raise InvalidInputError(
        f"Cannot change match status from {current.value} to {new.value}",
        current_status=current.value,
        requested_status=new.value,
    )


def _status_message(event_name: str, status: MatchStatus) -> str:
    if status == MatchStatus.COMPLETED:
        return f"{event_name} has been marked as completed"
    if status == MatchStatus.CANCELLED:
        return f"{event_name} has been cancelled"
    return f"Your match for {event_name} is now {status.value}"


class MatchLifecycleManager:
    """
    Sole writer of match records.

    Enforces one match per volunteer/event pair and the status transition
    rules, and notifies the volunteer about every change.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        scorer: MatchScorer | None = None,
        notifier: NotificationSink | None = None,
        policy: MatchingPolicy | None = None,
    ):
        self.uow = uow
        self.scorer = scorer or MatchScorer()
        self.notifier = notifier or LoggingNotificationSink()
        self.policy = policy or MatchingPolicy()

    # Lookups

    async def _require_volunteer(self, volunteer_id: str) -> Volunteer:
        with store_errors("get_volunteer", volunteer_id=volunteer_id):
            volunteer = await self.uow.volunteers.get_by_id(volunteer_id)
        if volunteer is None:
            raise NotFoundError("Volunteer not found", volunteer_id=volunteer_id)
        return volunteer

    async def _require_event(self, event_id: str) -> Event:
        with store_errors("get_event", event_id=event_id):
            event = await self.uow.events.get_by_id(event_id)
        if event is None:
            raise NotFoundError("Event not found", event_id=event_id)
        return event

    async def _event_name(self, event_id: str, fallback: str) -> str:
        with store_errors("get_event", event_id=event_id):
            event = await self.uow.events.get_by_id(event_id)
        return event.name if event else fallback

    async def calculate_score(self, volunteer_id: str, event_id: str) -> ScoreBreakdown:
        """
        Score an existing volunteer against an existing event.

        Raises:
            NotFoundError: if either does not exist
        """
        volunteer = await self._require_volunteer(volunteer_id)
        event = await self._require_event(event_id)
        breakdown = self.scorer.score_breakdown(
            VolunteerProfile.from_record(volunteer), EventDetails.from_record(event)
        )
        get_metrics().record_score(breakdown.total)
        return breakdown

    async def get_match(self, match_id: str) -> MatchRecord:
        with store_errors("get_match", match_id=match_id):
            match = await self.uow.matches.get_by_id(match_id)
        if match is None:
            raise NotFoundError("Match not found", match_id=match_id)
        return MatchRecord.from_record(match)

    async def list_matches(self) -> list[MatchRecord]:
        """Every match, newest first."""
        with store_errors("list_matches"):
            matches = await self.uow.matches.list_all()
        return [MatchRecord.from_record(m) for m in matches]

    async def get_match_history(self) -> list[MatchHistoryEntry]:
        """
        Every match joined with its volunteer's name and its event's details.

        Ordered by event date, latest first. No matches is an empty list,
        not an error.
        """
        with store_errors("get_match_history"):
            rows = await self.uow.matches.list_history()
        history = [MatchHistoryEntry.from_records(m, v, e) for m, v, e in rows]
        logger.info(f"[LIFECYCLE] Match history: {len(history)} records")
        return history

    # Mutations

    async def insert_match(
        self,
        volunteer: VolunteerProfile,
        event: EventDetails,
        status: MatchStatus,
        score: int,
    ) -> MatchRecord:
        """
        Persist a match for a pair known to be unmatched and notify the volunteer.

        Callers hold ``mutation_lock()`` across their existence check and
        this call.

        Raises:
            ConflictError: if the store reports the pair already matched
        """
        try:
            with store_errors(
                "insert_match", volunteer_id=volunteer.id, event_id=event.id
            ):
                match = await self.uow.matches.create_match(
                    volunteer_id=volunteer.id,
                    event_id=event.id,
                    status=status.value,
                    match_score=score,
                )
        except IntegrityError as e:
            # The failed flush invalidates the transaction; roll back before reading
            await self.uow.rollback()
            with store_errors("get_match_by_pair", volunteer_id=volunteer.id, event_id=event.id):
                existing = await self.uow.matches.get_by_pair(volunteer.id, event.id)
            get_metrics().record_conflict()
            raise ConflictError(
                "Match already exists",
                match_id=existing.id if existing else None,
            ) from e

        record = MatchRecord.from_record(match)
        get_metrics().record_created(auto=status == self.policy.auto_match_status)

        with store_errors("notify", volunteer_id=volunteer.id, match_id=record.id):
            await self.notifier.notify(
                volunteer.id,
                f"You have been matched with {event.name} on {event.date}",
                kind=NotificationKind.MATCH_CREATED,
                event_id=event.id,
                match_id=record.id,
            )
        return record

    async def create_match(self, volunteer_id: str, event_id: str) -> MatchRecord:
        """
        Match a volunteer to an event by explicit request.

        The match starts as Matched.

        Raises:
            NotFoundError: if the volunteer or event does not exist
            ConflictError: if the pair already has a match in any status;
                ``match_id`` names the existing match
        """
        volunteer = VolunteerProfile.from_record(await self._require_volunteer(volunteer_id))
        event = EventDetails.from_record(await self._require_event(event_id))

        async with mutation_lock():
            with store_errors("get_match_by_pair", volunteer_id=volunteer_id, event_id=event_id):
                existing = await self.uow.matches.get_by_pair(volunteer_id, event_id)
            if existing is not None:
                get_metrics().record_conflict()
                logger.info(
                    f"[LIFECYCLE] Duplicate match {volunteer_id} x {event_id} "
                    f"rejected (existing: {existing.id})"
                )
                raise ConflictError("Match already exists", match_id=existing.id)

            score = self.scorer.score(volunteer, event)
            record = await self.insert_match(
                volunteer, event, self.policy.manual_match_status, score
            )

        logger.info(
            f"[LIFECYCLE] ✓ Match {record.id} created: {volunteer_id} x {event_id} "
            f"| Score: {score} | Status: {record.status.value}"
        )
        return record

    async def update_match_status(self, match_id: str, new_status: str) -> MatchRecord:
        """
        Move a match to a new status.

        Raises:
            InvalidInputError: if the status is unknown or the transition is not allowed
            NotFoundError: if the match does not exist
        """
        status = parse_status(new_status)

        with store_errors("get_match", match_id=match_id):
            match = await self.uow.matches.get_by_id(match_id)
        if match is None:
            raise NotFoundError("Match not found", match_id=match_id)

        current = MatchStatus(match.status)
        check_transition(current, status)

        volunteer_id, event_id = match.volunteer_id, match.event_id
        with store_errors("update_match_status", match_id=match_id):
            updated = await self.uow.matches.update_status(match_id, status.value)
        if updated is None:
            raise NotFoundError("Match not found", match_id=match_id)

        record = MatchRecord.from_record(updated)
        get_metrics().record_transition(status.value)

        event_name = await self._event_name(event_id, "the event")
        with store_errors("notify", volunteer_id=volunteer_id, match_id=match_id):
            await self.notifier.notify(
                volunteer_id,
                _status_message(event_name, status),
                kind=NotificationKind.STATUS_CHANGED,
                event_id=event_id,
                match_id=match_id,
            )

        logger.info(
            f"[LIFECYCLE] Match {match_id}: {current.value} -> {status.value}"
        )
        return record

    async def delete_match(self, match_id: str) -> None:
        """
        Permanently remove a match.

        Raises:
            NotFoundError: if the match does not exist
        """
        with store_errors("get_match", match_id=match_id):
            match = await self.uow.matches.get_by_id(match_id)
        if match is None:
            raise NotFoundError("Match not found", match_id=match_id)

        volunteer_id, event_id = match.volunteer_id, match.event_id
        with store_errors("delete_match", match_id=match_id):
            deleted = await self.uow.matches.delete(match_id)
        if not deleted:
            raise NotFoundError("Match not found", match_id=match_id)

        get_metrics().record_deleted()

        event_name = await self._event_name(event_id, "an event")
        with store_errors("notify", volunteer_id=volunteer_id, match_id=match_id):
            await self.notifier.notify(
                volunteer_id,
                f"Your match with {event_name} has been removed",
                kind=NotificationKind.MATCH_REMOVED,
                event_id=event_id,
                match_id=match_id,
            )
        logger.info(f"[LIFECYCLE] Match {match_id} deleted")
