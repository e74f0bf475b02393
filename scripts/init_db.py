#!/usr/bin/env python3
"""
One-shot helper: create tables without starting the server.
"""
import asyncio

from ascend.config import get_settings
from ascend.db import Database


async def main():
    db = Database(get_settings())
    try:
        await db.create_tables()
    finally:
        await db.dispose()


if __name__ == "__main__":
    asyncio.run(main())
    print("DB tables created.")
