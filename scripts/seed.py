#!/usr/bin/env python3
"""
Load the demo goals into an empty database:  python scripts/seed.py
"""
import asyncio

from ascend.config import get_settings
from ascend.db import Database
from ascend.services.goal_service import GoalStore
from ascend.services.seed import seed_demo_goals


async def main():
    db = Database(get_settings())
    try:
        await db.create_tables()
        async with db.session() as session:
            created = await seed_demo_goals(GoalStore(session))
    finally:
        await db.dispose()
    if created:
        print(f"Seeded {len(created)} goals.")
    else:
        print("Goals already exist; nothing seeded.")


if __name__ == "__main__":
    asyncio.run(main())
