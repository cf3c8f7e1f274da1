"""Unit of Work pattern for managing database transactions."""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db import base
from app.db.models import Volunteer, Event, Match, Notification
from app.db.repositories import (
    VolunteerRepository,
    EventRepository,
    MatchRepository,
    NotificationRepository,
)


class UnitOfWork:
    """
    Unit of Work pattern implementation for managing database transactions.

    This class provides a single entry point for all repository operations
    and ensures that all operations within a context share the same database
    session and transaction.

    Usage:
        async with UnitOfWork() as uow:
            engine = MatchingEngine(uow)
            match = await engine.create_match("v1", "e1")
        # committed on clean exit, rolled back on error
    """

    def __init__(
        self,
        session: Optional[AsyncSession] = None,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        """
        Initialize Unit of Work.

        Args:
            session: Optional existing session (caller keeps ownership)
            session_factory: Factory used when no session is given
                (defaults to the application's ``AsyncSessionLocal``)
        """
        self._session = session
        self._owned_session = session is None
        self._session_factory = session_factory

        # Repositories (initialized in __aenter__)
        self.volunteers: VolunteerRepository = None  # type: ignore
        self.events: EventRepository = None  # type: ignore
        self.matches: MatchRepository = None  # type: ignore
        self.notifications: NotificationRepository = None  # type: ignore

    @property
    def session(self) -> AsyncSession:
        assert self._session is not None, "UnitOfWork used outside its context"
        return self._session

    async def __aenter__(self):
        if self._owned_session:
            factory = self._session_factory or base.AsyncSessionLocal
            self._session = factory()

        assert self._session is not None, "Session must be initialized"
        self.volunteers = VolunteerRepository(Volunteer, self._session)
        self.events = EventRepository(Event, self._session)
        self.matches = MatchRepository(Match, self._session)
        self.notifications = NotificationRepository(Notification, self._session)

        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            await self.rollback()
        elif self._owned_session:
            await self.commit()

        if self._owned_session and self._session:
            await self._session.close()

    async def commit(self):
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self):
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def flush(self):
        """Flush pending changes to the database without committing."""
        if self._session:
            await self._session.flush()
