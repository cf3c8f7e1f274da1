"""HTTP tests for the /matching endpoints."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from app.db.repositories import MatchRepository
from app.db.unit_of_work import UnitOfWork
from app.main import app
from app.matching.router import get_uow


@pytest_asyncio.fixture
async def client(session_factory):
    async def _override_get_uow():
        async with UnitOfWork(session_factory=session_factory) as uow:
            yield uow

    app.dependency_overrides[get_uow] = _override_get_uow
    try:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def seeded(session_factory):
    """Two volunteers and two upcoming events, committed."""
    async with UnitOfWork(session_factory=session_factory) as uow:
        await uow.volunteers.create(
            id="v1", name="John Smith", location="NY",
            skills=["First Aid", "Driving"], availability=["2099-11-15"],
        )
        await uow.volunteers.create(
            id="v2", name="Jane Doe", location="Boston",
            skills=["Teaching"], availability=[],
        )
        await uow.events.create(
            id="e1", name="Food Drive", date="2099-11-15", location="NY",
            required_skills=["First Aid", "Driving"], urgency="High",
        )
        await uow.events.create(
            id="e2", name="Tutoring", date="2099-12-01", location="Boston",
            required_skills=["Teaching"],
        )


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert "x-request-id" in resp.headers


@pytest.mark.asyncio
class TestMatchEndpoints:

    async def test_create_match(self, client, seeded):
        resp = await client.post("/matching", json={"volunteer_id": "v1", "event_id": "e1"})

        assert resp.status_code == 201
        body = resp.json()
        assert body["status"] == "Matched"
        assert body["match_score"] == 100

        listed = await client.get("/matching")
        assert [m["id"] for m in listed.json()] == [body["id"]]

        fetched = await client.get(f"/matching/{body['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["event_id"] == "e1"

    async def test_duplicate_returns_existing_match_id(self, client, seeded):
        first = (await client.post("/matching", json={"volunteer_id": "v1", "event_id": "e1"})).json()

        resp = await client.post("/matching", json={"volunteer_id": "v1", "event_id": "e1"})

        assert resp.status_code == 400
        assert resp.json() == {"error": "Match already exists", "match_id": first["id"]}

    async def test_missing_volunteer_is_404(self, client, seeded):
        resp = await client.post("/matching", json={"volunteer_id": "nobody", "event_id": "e1"})
        assert resp.status_code == 404
        assert resp.json()["volunteer_id"] == "nobody"

    async def test_update_status(self, client, seeded):
        match = (await client.post("/matching", json={"volunteer_id": "v1", "event_id": "e1"})).json()

        resp = await client.put(f"/matching/{match['id']}/status", json={"status": "Completed"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "Completed"

        resp = await client.put(f"/matching/{match['id']}/status", json={"status": "Pending"})
        assert resp.status_code == 400

        resp = await client.put(f"/matching/{match['id']}/status", json={"status": "Bogus"})
        assert resp.status_code == 400
        assert resp.json()["allowed"] == ["Pending", "Matched", "Completed", "Cancelled"]

        resp = await client.put("/matching/missing/status", json={"status": "Completed"})
        assert resp.status_code == 404

    async def test_delete_match(self, client, seeded):
        match = (await client.post("/matching", json={"volunteer_id": "v1", "event_id": "e1"})).json()

        resp = await client.delete(f"/matching/{match['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Match deleted successfully", "match_id": match["id"]}

        assert (await client.get(f"/matching/{match['id']}")).status_code == 404
        assert (await client.delete(f"/matching/{match['id']}")).status_code == 404

    async def test_notifications_follow_lifecycle(self, client, seeded):
        match = (await client.post("/matching", json={"volunteer_id": "v1", "event_id": "e1"})).json()
        await client.delete(f"/matching/{match['id']}")

        resp = await client.get("/matching/notifications/v1")

        assert resp.status_code == 200
        assert {n["kind"] for n in resp.json()} == {"match_created", "match_removed"}

    async def test_mark_notifications_read(self, client, seeded):
        match = (await client.post("/matching", json={"volunteer_id": "v1", "event_id": "e1"})).json()
        await client.put(f"/matching/{match['id']}/status", json={"status": "Completed"})

        resp = await client.post("/matching/notifications/v1/read")

        assert resp.status_code == 200
        assert resp.json() == {"volunteer_id": "v1", "marked_read": 2}

        unread = await client.get("/matching/notifications/v1", params={"unread_only": True})
        assert unread.json() == []
        everything = await client.get("/matching/notifications/v1")
        assert all(n["is_read"] for n in everything.json())

        again = await client.post("/matching/notifications/v1/read")
        assert again.json()["marked_read"] == 0

    async def test_store_failure_is_500(self, client, seeded):
        failure = OperationalError("SELECT", {}, Exception("disk I/O error"))
        with patch.object(MatchRepository, "list_all", AsyncMock(side_effect=failure)):
            resp = await client.get("/matching")

        assert resp.status_code == 500
        assert resp.json() == {
            "error": "Store unavailable during list_matches",
            "operation": "list_matches",
        }


@pytest.mark.asyncio
class TestQueryEndpoints:

    async def test_history_empty_is_list(self, client):
        resp = await client.get("/matching/history/all")
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_history(self, client, seeded):
        await client.post("/matching", json={"volunteer_id": "v1", "event_id": "e1"})
        await client.post("/matching", json={"volunteer_id": "v2", "event_id": "e2"})

        resp = await client.get("/matching/history/all")

        body = resp.json()
        assert [h["event_id"] for h in body] == ["e2", "e1"]
        assert body[1]["volunteer_name"] == "John Smith"
        assert body[1]["urgency"] == "High"

    async def test_score(self, client, seeded):
        resp = await client.get("/matching/score", params={"volunteer_id": "v2", "event_id": "e1"})
        assert resp.status_code == 200
        assert resp.json()["total"] == 0

        resp = await client.get("/matching/score", params={"volunteer_id": "v2", "event_id": "nope"})
        assert resp.status_code == 404

    async def test_recommendations(self, client, seeded):
        resp = await client.get("/matching/recommendations/event/e1")
        assert resp.status_code == 200
        assert [r["volunteer"]["id"] for r in resp.json()] == ["v1"]

        resp = await client.get("/matching/recommendations/volunteer/v2")
        assert resp.status_code == 200
        assert [r["event"]["id"] for r in resp.json()] == ["e2"]

    async def test_recommendations_for_unknown_subject(self, client):
        assert (await client.get("/matching/recommendations/event/nope")).status_code == 404
        assert (await client.get("/matching/recommendations/volunteer/nope")).status_code == 404

    async def test_auto_match(self, client, seeded):
        resp = await client.post("/matching/auto")

        assert resp.status_code == 200
        body = resp.json()
        assert {(m["volunteer_id"], m["event_id"]) for m in body["created"]} == {
            ("v1", "e1"),
            ("v2", "e2"),
        }
        assert all(m["status"] == "Pending" for m in body["created"])
        assert body["summary"]["matches_created"] == 2

        again = await client.post("/matching/auto")
        assert again.json()["created"] == []

        metrics = (await client.get("/matching/metrics")).json()
        assert metrics["auto_match"]["runs"] == 2
        assert metrics["lifecycle"]["auto_created"] == 2
        assert metrics["stored_matches"] == {"Pending": 2}
