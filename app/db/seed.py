"""Seed database with sample volunteers and events for development."""

import asyncio
import sys

from app.db.init import create_tables
from app.db.unit_of_work import UnitOfWork
from app.testing.sample_data import sample_events, sample_volunteers


async def seed_database(interactive: bool = True) -> dict:
    """
    Insert the sample volunteers and events, skipping IDs that already exist.

    Returns:
        Counts of created and skipped rows
    """
    await create_tables()
    counts = {"volunteers": 0, "events": 0, "skipped": 0}

    async with UnitOfWork() as uow:
        print("Seeding database with sample data...")

        volunteer_count = await uow.volunteers.count()
        event_count = await uow.events.count()

        if interactive and (volunteer_count > 0 or event_count > 0):
            print("Database already contains data:")
            print(f"  - {volunteer_count} volunteers")
            print(f"  - {event_count} events")
            response = input("Do you want to continue and add more data? (y/n): ")
            if response.lower() != "y":
                print("Seeding cancelled.")
                return counts

        volunteers = sample_volunteers()
        print(f"\nSeeding {len(volunteers)} sample volunteers...")
        for row in volunteers:
            if await uow.volunteers.get_by_id(row["id"]):
                print(f"  - Skipping {row['id']} (already exists)")
                counts["skipped"] += 1
                continue
            if row.get("email") and await uow.volunteers.get_by_email(row["email"]):
                print(f"  - Skipping {row['id']} (email {row['email']} already registered)")
                counts["skipped"] += 1
                continue
            volunteer = await uow.volunteers.create(**row)
            counts["volunteers"] += 1
            print(f"  ✓ Created volunteer: {volunteer.id} {volunteer.name} ({volunteer.location})")

        events = sample_events()
        print(f"\nSeeding {len(events)} sample events...")
        for row in events:
            if await uow.events.get_by_id(row["id"]):
                print(f"  - Skipping {row['id']} (already exists)")
                counts["skipped"] += 1
                continue
            event = await uow.events.create(**row)
            counts["events"] += 1
            print(f"  ✓ Created event: {event.id} {event.name} on {event.date}")

    print("\n✓ Seeding complete!")
    return counts


if __name__ == "__main__":
    asyncio.run(seed_database(interactive="--yes" not in sys.argv))
