import os
import sys
from pathlib import Path
from typing import Any, AsyncGenerator

# Force test database URL before any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("ENV", "development")

# Ensure project root is on sys.path so `import app` works when running pytest from root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

import app.db.base  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.models import Event, Volunteer  # noqa: E402
from app.db.unit_of_work import UnitOfWork  # noqa: E402
from app.matching.metrics import reset_metrics  # noqa: E402


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    Fresh in-memory database per test.

    The application's engine and session factory are swapped for the test
    ones so code opening its own ``UnitOfWork()`` hits the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    original_engine = app.db.base.engine
    original_factory = app.db.base.AsyncSessionLocal
    app.db.base.engine = engine
    app.db.base.AsyncSessionLocal = factory
    try:
        yield factory
    finally:
        app.db.base.engine = original_engine
        app.db.base.AsyncSessionLocal = original_factory
        await engine.dispose()


@pytest_asyncio.fixture
async def uow(session_factory) -> AsyncGenerator[UnitOfWork, None]:
    """An open unit of work on the test database."""
    async with UnitOfWork(session_factory=session_factory) as unit:
        yield unit


@pytest.fixture(autouse=True)
def fresh_metrics():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def add_volunteer(uow):
    """Create a volunteer row; returns the ORM instance."""

    async def _add(
        id: str,
        skills: list[str] | None = None,
        availability: list[str] | None = None,
        location: str = "NY",
        name: str | None = None,
        **extra: Any,
    ) -> Volunteer:
        return await uow.volunteers.create(
            id=id,
            name=name or f"Volunteer {id}",
            location=location,
            skills=skills or [],
            availability=availability or [],
            **extra,
        )

    return _add


@pytest.fixture
def add_event(uow):
    """Create an event row; returns the ORM instance."""

    async def _add(
        id: str,
        required_skills: list[str] | None = None,
        date: str = "2099-11-15",
        location: str = "NY",
        status: str = "Active",
        name: str | None = None,
        urgency: str = "Medium",
    ) -> Event:
        return await uow.events.create(
            id=id,
            name=name or f"Event {id}",
            description=f"Description of {id}",
            date=date,
            location=location,
            required_skills=required_skills if required_skills is not None else [],
            urgency=urgency,
            status=status,
        )

    return _add
