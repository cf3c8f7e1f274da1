"""Volunteer repository with specialized queries."""

from typing import Optional, List

from app.db.models.volunteer import Volunteer
from app.db.repository import BaseRepository


class VolunteerRepository(BaseRepository[Volunteer]):
    """Repository for Volunteer model."""

    async def list_all(self) -> List[Volunteer]:
        """List every volunteer in enumeration order (ID ascending)."""
        return await self.get_all()

    async def get_by_email(self, email: str) -> Optional[Volunteer]:
        return await self.get_by_field("email", email)
