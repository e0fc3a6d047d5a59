"""Database initialization: connect and create feedback indexes."""

import asyncio

from axiom_api.db.indexes import setup_feedback_indexes
from axiom_api.db.session import close_db, init_db


async def main() -> None:
    """Initialize database indexes."""
    print("Connecting to MongoDB...")
    db = await init_db()

    try:
        print("Creating feedback indexes...")
        result = await setup_feedback_indexes(db)
        for name in result.created_indexes:
            print(f"  created  {name}")
        for name in result.existing_indexes:
            print(f"  exists   {name}")
        for failure in result.errors:
            print(f"  FAILED   {failure.index_name}: {failure.error}")
    finally:
        await close_db()

    if result.success:
        print("Database initialization complete!")
    else:
        raise SystemExit(1)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
