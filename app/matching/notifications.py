"""Notification sinks for match lifecycle events."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from app.db.repositories.notification_repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationKind:
    MATCH_CREATED = "match_created"
    STATUS_CHANGED = "status_changed"
    MATCH_REMOVED = "match_removed"


class NotificationSink(ABC):
    """Receives messages addressed to volunteers. Delivery is not confirmed."""

    @abstractmethod
    async def notify(
        self,
        volunteer_id: str,
        message: str,
        kind: str,
        event_id: Optional[str] = None,
        match_id: Optional[str] = None,
    ) -> None:
        """Hand a message to the sink."""


class LoggingNotificationSink(NotificationSink):
    """Writes notifications to the application log only."""

    async def notify(
        self,
        volunteer_id: str,
        message: str,
        kind: str,
        event_id: Optional[str] = None,
        match_id: Optional[str] = None,
    ) -> None:
        logger.info(f"[NOTIFY] ({kind}) volunteer {volunteer_id}: {message}")


class DatabaseNotificationSink(LoggingNotificationSink):
    """Logs notifications and stores them in the notifications table.

    The row is written in the caller's transaction, so a rolled-back match
    change leaves no notification behind.
    """

    def __init__(self, repository: NotificationRepository):
        self.repository = repository

    async def notify(
        self,
        volunteer_id: str,
        message: str,
        kind: str,
        event_id: Optional[str] = None,
        match_id: Optional[str] = None,
    ) -> None:
        await super().notify(volunteer_id, message, kind, event_id, match_id)
        await self.repository.create_notification(
            volunteer_id=volunteer_id,
            kind=kind,
            message=message,
            event_id=event_id,
            match_id=match_id,
        )


class RecordingNotificationSink(NotificationSink):
    """Keeps notifications in memory instead of delivering them."""

    def __init__(self) -> None:
        self.sent: list[dict] = []

    async def notify(
        self,
        volunteer_id: str,
        message: str,
        kind: str,
        event_id: Optional[str] = None,
        match_id: Optional[str] = None,
    ) -> None:
        self.sent.append(
            {
                "volunteer_id": volunteer_id,
                "message": message,
                "kind": kind,
                "event_id": event_id,
                "match_id": match_id,
            }
        )
