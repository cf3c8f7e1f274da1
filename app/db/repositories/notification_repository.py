"""Notification repository."""

from typing import Optional, List
from sqlalchemy import select, desc, update

from app.db.models.notification import Notification
from app.db.repository import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification model."""

    async def create_notification(
        self,
        volunteer_id: str,
        kind: str,
        message: str,
        event_id: Optional[str] = None,
        match_id: Optional[str] = None,
    ) -> Notification:
        return await self.create(
            volunteer_id=volunteer_id,
            kind=kind,
            message=message,
            event_id=event_id,
            match_id=match_id,
        )

    async def get_for_volunteer(
        self, volunteer_id: str, unread_only: bool = False, limit: Optional[int] = None
    ) -> List[Notification]:
        """
        Get a volunteer's notifications, newest first.

        Args:
            volunteer_id: Recipient volunteer ID
            unread_only: Skip notifications already marked read
            limit: Maximum number to return

        Returns:
            List of notifications
        """
        query = select(self.model).where(self.model.volunteer_id == volunteer_id)
        if unread_only:
            query = query.where(self.model.is_read.is_(False))
        query = query.order_by(desc(self.model.created_at), desc(self.model.id))
        if limit:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def mark_all_read(self, volunteer_id: str) -> int:
        """Mark every notification of a volunteer as read; returns rows changed."""
        result = await self.session.execute(
            update(self.model)
            .where(self.model.volunteer_id == volunteer_id, self.model.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return result.rowcount or 0  # type: ignore
