"""In-process metrics for the matching engine."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from app.matching.models import AutoMatchResult

logger = logging.getLogger(__name__)


class ScoreDistribution(BaseModel):
    """Distribution of computed scores."""

    perfect: int = Field(default=0, description="Score == 100")
    high: int = Field(default=0, description="75 <= score < 100")
    medium: int = Field(default=0, description="50 <= score < 75")
    low: int = Field(default=0, description="1 <= score < 50")
    zero: int = Field(default=0, description="Score == 0")

    def add_score(self, score: int) -> None:
        if score >= 100:
            self.perfect += 1
        elif score >= 75:
            self.high += 1
        elif score >= 50:
            self.medium += 1
        elif score > 0:
            self.low += 1
        else:
            self.zero += 1

    def get_summary(self) -> dict[str, Any]:
        counts = self.model_dump()
        total = sum(counts.values())
        if total == 0:
            return {}
        return {
            "counts": counts,
            **{f"{name}_pct": count / total for name, count in counts.items()},
        }


class MatchingMetrics(BaseModel):
    """Counters for scoring, lifecycle changes and auto-match runs."""

    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Scoring
    scores_computed: int = 0
    score_distribution: ScoreDistribution = Field(default_factory=ScoreDistribution)

    # Lifecycle
    manual_matches_created: int = 0
    auto_matches_created: int = 0
    conflicts_rejected: int = 0
    status_transitions: dict[str, int] = Field(default_factory=dict)
    matches_deleted: int = 0

    # Auto-match runs
    auto_match_runs: int = 0
    last_auto_match: dict[str, Any] | None = None

    def _touch(self) -> None:
        self.last_updated = datetime.now(timezone.utc)

    def record_score(self, score: int) -> None:
        self.scores_computed += 1
        self.score_distribution.add_score(score)
        self._touch()

    def record_created(self, auto: bool = False) -> None:
        if auto:
            self.auto_matches_created += 1
        else:
            self.manual_matches_created += 1
        self._touch()

    def record_conflict(self) -> None:
        self.conflicts_rejected += 1
        self._touch()

    def record_transition(self, new_status: str) -> None:
        self.status_transitions[new_status] = self.status_transitions.get(new_status, 0) + 1
        self._touch()

    def record_deleted(self) -> None:
        self.matches_deleted += 1
        self._touch()

    def record_auto_match(self, result: AutoMatchResult) -> None:
        self.auto_match_runs += 1
        self.last_auto_match = result.get_summary()
        self._touch()

    def get_summary(self) -> dict[str, Any]:
        """Get metrics summary."""
        return {
            "timing": {
                "started_at": self.started_at.isoformat(),
                "last_updated": self.last_updated.isoformat(),
            },
            "scoring": {
                "scores_computed": self.scores_computed,
                "distribution": self.score_distribution.get_summary(),
            },
            "lifecycle": {
                "manual_created": self.manual_matches_created,
                "auto_created": self.auto_matches_created,
                "conflicts_rejected": self.conflicts_rejected,
                "status_transitions": dict(self.status_transitions),
                "deleted": self.matches_deleted,
            },
            "auto_match": {
                "runs": self.auto_match_runs,
                "last_run": self.last_auto_match,
            },
        }


# Global metrics instance
_global_metrics = MatchingMetrics()


def get_metrics() -> MatchingMetrics:
    """Get global metrics instance."""
    return _global_metrics


def reset_metrics() -> None:
    """Reset global metrics."""
    global _global_metrics
    _global_metrics = MatchingMetrics()
    logger.info("Matching metrics reset")
