"""REST API endpoints for matching, recommendations and match history."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field

from app.core.errors import NotFoundError, store_errors
from app.db.unit_of_work import UnitOfWork
from app.matching.engine import MatchingEngine
from app.matching.metrics import get_metrics
from app.matching.models import (
    EventRecommendation,
    MatchHistoryEntry,
    MatchRecord,
    ScoreBreakdown,
    VolunteerRecommendation,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matching", tags=["matching"])


async def get_uow() -> AsyncIterator[UnitOfWork]:
    """One unit of work per request: committed on success, rolled back on error."""
    async with UnitOfWork() as uow:
        yield uow


# Request/Response models
class CreateMatchRequest(BaseModel):
    volunteer_id: str = Field(..., min_length=1)
    event_id: str = Field(..., min_length=1)


class UpdateStatusRequest(BaseModel):
    status: str = Field(..., description="Pending, Matched, Completed or Cancelled")


class DeleteMatchResponse(BaseModel):
    message: str
    match_id: str


class AutoMatchResponse(BaseModel):
    created: list[MatchRecord]
    summary: dict


class MarkReadResponse(BaseModel):
    volunteer_id: str
    marked_read: int


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    volunteer_id: str
    kind: str
    message: str
    event_id: Optional[str]
    match_id: Optional[str]
    is_read: bool
    created_at: datetime


# Specific paths first so they are not captured by /{match_id}
@router.get("/history/all", response_model=list[MatchHistoryEntry])
async def get_match_history(uow: UnitOfWork = Depends(get_uow)):
    """Every match with volunteer and event details. Empty history is an empty list."""
    return await MatchingEngine(uow).get_match_history()


@router.get("/score", response_model=ScoreBreakdown)
async def calculate_score(
    volunteer_id: str = Query(..., min_length=1),
    event_id: str = Query(..., min_length=1),
    uow: UnitOfWork = Depends(get_uow),
):
    return await MatchingEngine(uow).calculate_score(volunteer_id, event_id)


@router.get(
    "/recommendations/event/{event_id}",
    response_model=list[VolunteerRecommendation],
)
async def get_recommended_volunteers(event_id: str, uow: UnitOfWork = Depends(get_uow)):
    """Volunteers ranked for an event. 404 if the event does not exist."""
    if await uow.events.get_by_id(event_id) is None:
        raise NotFoundError("Event not found", event_id=event_id)
    return await MatchingEngine(uow).recommend_volunteers(event_id)


@router.get(
    "/recommendations/volunteer/{volunteer_id}",
    response_model=list[EventRecommendation],
)
async def get_recommended_events(
    volunteer_id: str, uow: UnitOfWork = Depends(get_uow)
):
    """Upcoming active events ranked for a volunteer. 404 if the volunteer does not exist."""
    if await uow.volunteers.get_by_id(volunteer_id) is None:
        raise NotFoundError("Volunteer not found", volunteer_id=volunteer_id)
    return await MatchingEngine(uow).recommend_events(volunteer_id)


@router.post("/auto", response_model=AutoMatchResponse)
async def auto_match_all(uow: UnitOfWork = Depends(get_uow)):
    """Run one auto-match pass; returns only the matches it created."""
    logger.info("[API] Auto-match requested")
    result = await MatchingEngine(uow).auto_match_all()
    return AutoMatchResponse(created=result.created, summary=result.get_summary())


@router.get("/metrics")
async def matching_metrics(uow: UnitOfWork = Depends(get_uow)):
    """In-process counters plus the stored matches per status."""
    summary = get_metrics().get_summary()
    with store_errors("count_matches_by_status"):
        summary["stored_matches"] = await uow.matches.count_by_status()
    return summary


@router.get(
    "/notifications/{volunteer_id}", response_model=list[NotificationResponse]
)
async def get_notifications(
    volunteer_id: str,
    unread_only: bool = False,
    limit: Optional[int] = Query(default=50, ge=1, le=500),
    uow: UnitOfWork = Depends(get_uow),
):
    """A volunteer's notifications, newest first."""
    return await uow.notifications.get_for_volunteer(
        volunteer_id, unread_only=unread_only, limit=limit
    )


@router.post(
    "/notifications/{volunteer_id}/read", response_model=MarkReadResponse
)
async def mark_notifications_read(volunteer_id: str, uow: UnitOfWork = Depends(get_uow)):
    """Mark every unread notification of a volunteer as read."""
    with store_errors("mark_notifications_read", volunteer_id=volunteer_id):
        marked = await uow.notifications.mark_all_read(volunteer_id)
    logger.info(f"[API] Marked {marked} notifications read for {volunteer_id}")
    return MarkReadResponse(volunteer_id=volunteer_id, marked_read=marked)


# Generic match routes
@router.get("", response_model=list[MatchRecord])
async def list_matches(uow: UnitOfWork = Depends(get_uow)):
    return await MatchingEngine(uow).list_matches()


@router.post("", response_model=MatchRecord, status_code=status.HTTP_201_CREATED)
async def create_match(request: CreateMatchRequest, uow: UnitOfWork = Depends(get_uow)):
    """Match a volunteer to an event. 400 with ``match_id`` if the pair is already matched."""
    return await MatchingEngine(uow).create_match(request.volunteer_id, request.event_id)


@router.get("/{match_id}", response_model=MatchRecord)
async def get_match(match_id: str, uow: UnitOfWork = Depends(get_uow)):
    return await MatchingEngine(uow).get_match(match_id)


@router.put("/{match_id}/status", response_model=MatchRecord)
async def update_match_status(
    match_id: str, request: UpdateStatusRequest, uow: UnitOfWork = Depends(get_uow)
):
    return await MatchingEngine(uow).update_match_status(match_id, request.status)


@router.delete("/{match_id}", response_model=DeleteMatchResponse)
async def delete_match(match_id: str, uow: UnitOfWork = Depends(get_uow)):
    await MatchingEngine(uow).delete_match(match_id)
    return DeleteMatchResponse(message="Match deleted successfully", match_id=match_id)
