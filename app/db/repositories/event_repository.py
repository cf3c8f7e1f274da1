"""Event repository with specialized queries."""

from typing import List

from app.db.models.event import Event
from app.db.repository import BaseRepository


class EventRepository(BaseRepository[Event]):
    """Repository for Event model."""

    async def list_all(self) -> List[Event]:
        """List every event in enumeration order (ID ascending)."""
        return await self.get_all()

    async def list_upcoming_active(
        self, today: str, status: str = "Active"
    ) -> List[Event]:
        """
        Get events open for matching.

        Args:
            today: Current date as ISO YYYY-MM-DD; ISO strings sort chronologically
            status: Event status that is open for matching

        Returns:
            Open events dated today or later, ID ascending
        """
        return await self.filter(status=status, date__gte=today)
