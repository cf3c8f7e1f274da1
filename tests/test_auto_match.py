"""Tests for batch auto-matching."""

import pytest

from app.db.unit_of_work import UnitOfWork
from app.matching.config import MatchingPolicy
from app.matching.engine import MatchingEngine, auto_match_all
from app.matching.metrics import get_metrics
from app.matching.models import MatchStatus
from app.matching.notifications import RecordingNotificationSink

TODAY = "2099-06-01"


@pytest.fixture
def sink():
    return RecordingNotificationSink()


@pytest.fixture
def engine(uow, sink):
    return MatchingEngine(uow, notifier=sink)


@pytest.mark.asyncio
class TestAutoMatch:

    async def test_creates_pending_match_for_best_event(
        self, engine, sink, add_volunteer, add_event
    ):
        await add_volunteer("v1", ["Cooking", "Driving"], ["2099-07-01"], location="NY")
        await add_event("e1", ["Cooking"], date="2099-07-02", location="LA")  # 60
        await add_event("e2", ["Cooking", "Driving"], date="2099-07-01", location="NY")  # 100

        result = await engine.auto_match_all(today=TODAY)

        assert len(result.created) == 1
        match = result.created[0]
        assert (match.volunteer_id, match.event_id) == ("v1", "e2")
        assert match.status == MatchStatus.PENDING
        assert match.match_score == 100
        assert result.volunteers_considered == 1
        assert result.completed_at is not None

        assert sink.sent[0]["kind"] == "match_created"
        assert get_metrics().auto_matches_created == 1
        assert get_metrics().auto_match_runs == 1

    async def test_one_match_per_volunteer_per_run(self, engine, uow, add_volunteer, add_event):
        await add_volunteer("v1", ["Cooking"], [], location="NY")
        await add_volunteer("v2", ["Cooking"], [], location="NY")
        for eid in ["e1", "e2", "e3"]:
            await add_event(eid, ["Cooking"], date="2099-07-01")

        result = await engine.auto_match_all(today=TODAY)

        assert sorted(m.volunteer_id for m in result.created) == ["v1", "v2"]
        assert await uow.matches.count() == 2

    async def test_volunteer_at_capacity_is_skipped(self, engine, uow, add_volunteer, add_event):
        await add_volunteer("v1", ["Cooking"], [], location="NY")
        for eid in ["e1", "e2", "e3", "e4"]:
            await add_event(eid, ["Cooking"], date="2099-07-01")
        await uow.matches.create_match("v1", "e1", "Pending", 70)
        await uow.matches.create_match("v1", "e2", "Matched", 70)
        await uow.matches.create_match("v1", "e3", "Pending", 70)

        result = await engine.auto_match_all(today=TODAY)

        assert result.created == []
        assert result.skipped_at_capacity == 1
        assert await uow.matches.count() == 3

    async def test_closed_matches_do_not_count_toward_capacity(
        self, engine, uow, add_volunteer, add_event
    ):
        await add_volunteer("v1", ["Cooking"], [], location="NY")
        for eid in ["e1", "e2", "e3", "e4"]:
            await add_event(eid, ["Cooking"], date="2099-07-01")
        await uow.matches.create_match("v1", "e1", "Pending", 70)
        await uow.matches.create_match("v1", "e2", "Completed", 70)
        await uow.matches.create_match("v1", "e3", "Cancelled", 70)

        result = await engine.auto_match_all(today=TODAY)

        assert [m.event_id for m in result.created] == ["e4"]

    async def test_previously_matched_events_are_never_candidates(
        self, engine, uow, add_volunteer, add_event
    ):
        await add_volunteer("v1", ["Cooking"], ["2099-07-01"], location="NY")
        await add_event("e1", ["Cooking"], date="2099-07-01")  # 100, but cancelled before
        await add_event("e2", ["Cooking"], date="2099-07-02")  # 70
        await uow.matches.create_match("v1", "e1", "Cancelled", 100)

        result = await engine.auto_match_all(today=TODAY)

        assert [m.event_id for m in result.created] == ["e2"]

    async def test_no_candidates(self, engine, uow, add_volunteer, add_event):
        await add_volunteer("v1", ["Cooking"], [], location="NY")
        await add_event("e1", ["Cooking"], date="2099-07-01")
        await add_event("past", ["Cooking"], date="2099-05-01")
        await add_event("closed", ["Cooking"], date="2099-07-01", status="Cancelled")
        await uow.matches.create_match("v1", "e1", "Completed", 70)

        result = await engine.auto_match_all(today=TODAY)

        assert result.created == []
        assert result.no_candidates == 1

    @pytest.mark.parametrize(
        "skills_held,required,expected_score,created",
        [
            # 4 of 6 skills = 40, plus location = 50
            (4, 6, 50, True),
            # 13 of 16 skills = 48.75 rounds to 49
            (13, 16, 49, False),
        ],
    )
    async def test_threshold_is_inclusive(
        self, engine, add_volunteer, add_event, skills_held, required, expected_score, created
    ):
        skills = [f"skill-{i}" for i in range(required)]
        location = "NY" if expected_score == 50 else "LA"
        await add_volunteer("v1", skills[:skills_held], [], location=location)
        await add_event("e1", skills, date="2099-07-01", location="NY")

        assert (await engine.calculate_score("v1", "e1")).total == expected_score

        result = await engine.auto_match_all(today=TODAY)

        assert bool(result.created) is created
        assert result.below_threshold == (0 if created else 1)

    async def test_custom_threshold(self, uow, add_volunteer, add_event):
        await add_volunteer("v1", ["Cooking"], [], location="LA")
        await add_event("e1", ["Cooking", "Driving"], date="2099-07-01")  # 30

        lenient = MatchingEngine(
            uow,
            policy=MatchingPolicy(auto_match_threshold=30),
            notifier=RecordingNotificationSink(),
        )
        result = await lenient.auto_match_all(today=TODAY)

        assert [m.match_score for m in result.created] == [30]

    async def test_ties_go_to_first_event_by_id(self, engine, add_volunteer, add_event):
        await add_volunteer("v1", ["Cooking"], [], location="NY")
        for eid in ["e3", "e1", "e2"]:
            await add_event(eid, ["Cooking"], date="2099-07-01")

        result = await engine.auto_match_all(today=TODAY)

        assert [m.event_id for m in result.created] == ["e1"]

    async def test_returns_only_matches_created_by_this_run(
        self, engine, uow, add_volunteer, add_event
    ):
        await add_volunteer("v1", ["Cooking"], [], location="NY")
        await add_event("e1", ["Cooking"], date="2099-07-01")
        await add_event("e2", ["Cooking"], date="2099-07-02")

        first = await engine.auto_match_all(today=TODAY)
        second = await engine.auto_match_all(today=TODAY)
        third = await engine.auto_match_all(today=TODAY)

        assert [m.event_id for m in first.created] == ["e1"]
        assert [m.event_id for m in second.created] == ["e2"]
        assert third.created == []
        assert await uow.matches.count() == 2

    async def test_empty_database(self, engine):
        result = await engine.auto_match_all(today=TODAY)
        assert result.created == []
        assert result.get_summary()["matches_created"] == 0


@pytest.mark.asyncio
async def test_module_level_run_commits(session_factory, uow, add_volunteer, add_event):
    await add_volunteer("v1", ["Cooking"], [], location="NY")
    await add_event("e1", ["Cooking"], date="2099-07-01")
    await uow.commit()

    result = await auto_match_all(today=TODAY)
    assert len(result.created) == 1

    async with session_factory() as session:
        async with UnitOfWork(session=session) as check:
            stored = await check.matches.get_by_pair("v1", "e1")
            assert stored is not None
            assert stored.status == "Pending"
