"""Repository exports."""

from .volunteer_repository import VolunteerRepository
from .event_repository import EventRepository
from .match_repository import MatchRepository
from .notification_repository import NotificationRepository

__all__ = [
    "VolunteerRepository",
    "EventRepository",
    "MatchRepository",
    "NotificationRepository",
]
