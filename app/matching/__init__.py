"""Matching engine module exports."""

from app.matching.models import (
    MatchStatus,
    VolunteerPreferences,
    VolunteerProfile,
    EventDetails,
    ComponentScore,
    ScoreBreakdown,
    VolunteerRecommendation,
    EventRecommendation,
    MatchRecord,
    MatchHistoryEntry,
    AutoMatchResult,
)

from app.matching.config import MatchingPolicy

from app.matching.scorer import MatchScorer, calculate_match_score

from app.matching.engine import (
    MatchingEngine,
    auto_match_all,
)

from app.matching.metrics import (
    MatchingMetrics,
    get_metrics,
    reset_metrics,
)

__all__ = [
    # Models
    "MatchStatus",
    "VolunteerPreferences",
    "VolunteerProfile",
    "EventDetails",
    "ComponentScore",
    "ScoreBreakdown",
    "VolunteerRecommendation",
    "EventRecommendation",
    "MatchRecord",
    "MatchHistoryEntry",
    "AutoMatchResult",
    # Config
    "MatchingPolicy",
    # Scoring
    "MatchScorer",
    "calculate_match_score",
    # Engine
    "MatchingEngine",
    "auto_match_all",
    # Metrics
    "MatchingMetrics",
    "get_metrics",
    "reset_metrics",
]
