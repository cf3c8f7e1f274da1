"""Business policy for the matching engine.

Match Status Flow:
------------------
    Pending -> Matched -> Completed
       |          |
       +----------+----> Cancelled

- Manual matches (``create_match``) start as "Matched".
- Auto-matches (``auto_match_all``) start as "Pending" and need confirmation.
- "Completed" and "Cancelled" are terminal.

Recommendation exclusion:
- A "Matched" or "Completed" match on a pair blocks re-recommending it.
- "Pending" and "Cancelled" matches do not block.

Auto-match:
- Volunteers holding ``max_open_matches`` or more "Pending"/"Matched"
  matches are skipped.
- The best candidate must score at least ``auto_match_threshold``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.matching.models import MatchStatus


class MatchingPolicy(BaseModel):
    """Thresholds and status groupings used by recommender and auto-matcher."""

    auto_match_threshold: int = Field(
        default=50, ge=0, le=100, description="Minimum score for an auto-match"
    )
    max_open_matches: int = Field(
        default=3,
        ge=1,
        description="Open (Pending/Matched) matches a volunteer may hold before auto-match skips them",
    )
    blocking_statuses: frozenset[MatchStatus] = Field(
        default=frozenset({MatchStatus.MATCHED, MatchStatus.COMPLETED}),
        description="Match statuses that exclude a pair from recommendations",
    )
    open_statuses: frozenset[MatchStatus] = Field(
        default=frozenset({MatchStatus.PENDING, MatchStatus.MATCHED}),
        description="Match statuses counted against the capacity cap",
    )
    eligible_event_status: str = Field(
        default="Active", description="Event status open for matching"
    )
    manual_match_status: MatchStatus = Field(default=MatchStatus.MATCHED)
    auto_match_status: MatchStatus = Field(default=MatchStatus.PENDING)

    def blocking_values(self) -> list[str]:
        return sorted(s.value for s in self.blocking_statuses)

    def open_values(self) -> list[str]:
        return sorted(s.value for s in self.open_statuses)
