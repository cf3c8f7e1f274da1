"""Database models for the volunteer matching engine."""

from .volunteer import Volunteer
from .event import Event
from .match import Match
from .notification import Notification

__all__ = ["Volunteer", "Event", "Match", "Notification"]
