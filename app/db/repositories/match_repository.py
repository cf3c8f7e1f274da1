"""Match repository with specialized queries."""

from datetime import datetime, timezone
from typing import Optional, List, Iterable
from sqlalchemy import desc, func, select

from app.db.models.event import Event
from app.db.models.match import Match
from app.db.models.volunteer import Volunteer
from app.db.repository import BaseRepository


class MatchRepository(BaseRepository[Match]):
    """Repository for Match model with specialized queries."""

    async def get_by_volunteer(
        self, volunteer_id: str, statuses: Optional[Iterable[str]] = None
    ) -> List[Match]:
        """
        Get matches held by a volunteer.

        Args:
            volunteer_id: Volunteer ID
            statuses: Restrict to these statuses (all statuses if None)

        Returns:
            List of matches
        """
        if statuses is None:
            return await self.filter(volunteer_id=volunteer_id)
        return await self.filter(volunteer_id=volunteer_id, status__in=statuses)

    async def get_by_event(
        self, event_id: str, statuses: Optional[Iterable[str]] = None
    ) -> List[Match]:
        """
        Get matches made against an event.

        Args:
            event_id: Event ID
            statuses: Restrict to these statuses (all statuses if None)

        Returns:
            List of matches
        """
        if statuses is None:
            return await self.filter(event_id=event_id)
        return await self.filter(event_id=event_id, status__in=statuses)

    async def get_by_pair(self, volunteer_id: str, event_id: str) -> Optional[Match]:
        """Get the match for a volunteer/event pair, whatever its status."""
        result = await self.session.execute(
            select(self.model).where(
                self.model.volunteer_id == volunteer_id,
                self.model.event_id == event_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[Match]:
        """Get every match, newest first."""
        query = select(self.model).order_by(
            desc(self.model.created_at), self.model.id
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create_match(
        self,
        volunteer_id: str,
        event_id: str,
        status: str,
        match_score: int,
    ) -> Match:
        """
        Create a new match record.

        Raises:
            IntegrityError: if the pair already has a match
        """
        now = datetime.now(timezone.utc)
        return await self.create(
            volunteer_id=volunteer_id,
            event_id=event_id,
            status=status,
            match_score=match_score,
            created_at=now,
            updated_at=now,
        )

    async def update_status(self, match_id: str, status: str) -> Optional[Match]:
        """
        Update match status and touch updated_at.

        Returns:
            Updated match instance, or None if not found
        """
        return await self.update(
            match_id, status=status, updated_at=datetime.now(timezone.utc)
        )

    async def list_history(self) -> List[tuple[Match, Volunteer, Event]]:
        """
        Join every match with its volunteer and event.

        Matches whose volunteer or event no longer exists are left out.

        Returns:
            (match, volunteer, event) rows, event date descending
        """
        query = (
            select(self.model, Volunteer, Event)
            .join(Volunteer, Volunteer.id == self.model.volunteer_id)
            .join(Event, Event.id == self.model.event_id)
            .order_by(desc(Event.date), desc(self.model.created_at), self.model.id)
        )
        result = await self.session.execute(query)
        return [(row[0], row[1], row[2]) for row in result.all()]

    async def count_by_status(self) -> dict[str, int]:
        """Get the number of matches in each status."""
        query = select(self.model.status, func.count(self.model.id)).group_by(
            self.model.status
        )
        result = await self.session.execute(query)
        return {status: count for status, count in result.all()}
