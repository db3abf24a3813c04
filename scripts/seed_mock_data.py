#!/usr/bin/env python3
"""
Seed the database with NBA teams, players and 2023-24 stat lines for development.

Uses DATABASE_URL. Idempotent: does nothing when teams already exist.
"""

import asyncio
import os
import sys

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from fantasy_hoops.database import db
from fantasy_hoops.services.domain_store import DomainStore
from fantasy_hoops.services.revenue_ledger import UnconfiguredRevenueLedger
from fantasy_hoops.services.seed_service import seed_mock_data


async def main():
    """Create tables if needed and insert the seed data."""
    print("Seeding mock NBA data...")

    engine = db.create_engine()
    try:
        await db.init_database(engine)
        store = DomainStore(db.create_session_maker(engine), UnconfiguredRevenueLedger())
        created = await seed_mock_data(store)
        print(f"  Teams: {created['teams']} created")
        print(f"  Players: {created['players']} created")
        print(f"  Player stats: {created['player_stats']} created")
    finally:
        await engine.dispose()

    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())
