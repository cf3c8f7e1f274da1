"""
Matching engine CLI commands.

Runs auto-matching, scoring and recommendations against the configured
database from the command line.
"""

import asyncio
import sys

import structlog

from app.core.config import get_settings
from app.core.errors import MatchingError
from app.core.logging import configure_logging
from app.db.init import create_tables
from app.db.unit_of_work import UnitOfWork
from app.matching.engine import MatchingEngine, auto_match_all

logger = structlog.get_logger()


def print_auto_match(summary: dict, created: list):
    """Pretty print an auto-match run."""
    print("\n=== Auto-Match Run ===\n")
    print(f"Volunteers considered: {summary['volunteers_considered']}")
    print(f"Matches created: {summary['matches_created']}")
    print(f"Skipped at capacity: {summary['skipped_at_capacity']}")
    print(f"No candidates: {summary['no_candidates']}")
    print(f"Below threshold: {summary['below_threshold']}")
    if created:
        print("\n--- New Pending Matches ---")
        for match in created:
            print(f"{match.volunteer_id} -> {match.event_id} (score {match.match_score})")
    print()


async def auto_match_command():
    """Run one auto-match pass and commit it."""
    await create_tables()
    result = await auto_match_all()
    print_auto_match(result.get_summary(), result.created)
    return 0


async def score_command(volunteer_id: str, event_id: str):
    """Show the score breakdown for one pair."""
    async with UnitOfWork() as uow:
        breakdown = await MatchingEngine(uow).calculate_score(volunteer_id, event_id)

    print(f"\n=== Score {volunteer_id} x {event_id}: {breakdown.total} ===\n")
    for component in breakdown.components:
        print(f"{component.component:<13} {component.points:>5.1f} / {component.max_points}")
    print()
    return 0


async def recommend_events_command(volunteer_id: str):
    async with UnitOfWork() as uow:
        recommendations = await MatchingEngine(uow).recommend_events(volunteer_id)

    print(f"\n=== Events for {volunteer_id} ===\n")
    if not recommendations:
        print("No recommendations.")
    for rec in recommendations:
        print(f"{rec.match_score:>3}  {rec.event.id}  {rec.event.name} ({rec.event.date}, {rec.event.location})")
    print()
    return 0


async def recommend_volunteers_command(event_id: str):
    async with UnitOfWork() as uow:
        recommendations = await MatchingEngine(uow).recommend_volunteers(event_id)

    print(f"\n=== Volunteers for {event_id} ===\n")
    if not recommendations:
        print("No recommendations.")
    for rec in recommendations:
        print(f"{rec.match_score:>3}  {rec.volunteer.id}  {rec.volunteer.name} ({rec.volunteer.location})")
    print()
    return 0


async def history_command():
    async with UnitOfWork() as uow:
        history = await MatchingEngine(uow).get_match_history()

    print("\n=== Match History ===\n")
    if not history:
        print("No matches yet.")
    for entry in history:
        print(
            f"{entry.event_date}  {entry.volunteer_name} -> {entry.event_name} "
            f"[{entry.status.value}] score {entry.match_score}"
        )
    print()
    return 0


def main():
    """Main CLI entry point."""
    settings = get_settings()
    configure_logging(settings.ENV, settings.LOG_LEVEL)

    if len(sys.argv) < 2:
        print("Usage: python -m app.matching.cli <command> [options]")
        print("\nCommands:")
        print("  auto-match                        Run one auto-match pass")
        print("  score <volunteer_id> <event_id>   Show a score breakdown")
        print("  recommend-events <volunteer_id>   Rank upcoming events for a volunteer")
        print("  recommend-volunteers <event_id>   Rank volunteers for an event")
        print("  history                           Show match history")
        print("\nExamples:")
        print("  python -m app.matching.cli auto-match")
        print("  python -m app.matching.cli score v1 e1")
        return 1

    command = sys.argv[1]
    args = sys.argv[2:]

    try:
        if command == "auto-match":
            return asyncio.run(auto_match_command())
        elif command == "score" and len(args) == 2:
            return asyncio.run(score_command(args[0], args[1]))
        elif command == "recommend-events" and len(args) == 1:
            return asyncio.run(recommend_events_command(args[0]))
        elif command == "recommend-volunteers" and len(args) == 1:
            return asyncio.run(recommend_volunteers_command(args[0]))
        elif command == "history":
            return asyncio.run(history_command())
        else:
            print(f"Unknown command or wrong arguments: {' '.join(sys.argv[1:])}")
            return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    except MatchingError as e:
        print(f"Error: {e.message} {e.context}")
        return 2
    except Exception as e:
        print(f"Error: {str(e)}")
        logger.exception("cli_error", command=command)
        return 1


if __name__ == "__main__":
    sys.exit(main())
