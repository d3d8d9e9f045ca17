"""
Script to initialize the database with all tables.
This bypasses Alembic and uses SQLAlchemy's create_all() method.
"""
import asyncio
import sys

from realty_crm.core.config import settings
from realty_crm.database import Database


async def init_db(reset: bool = False):
    """Create all tables in the database (dropping them first with --reset)"""
    database = Database(settings.DATABASE_URL)
    try:
        if reset:
            await database.drop_all()
            print("✓ Existing tables dropped")
        await database.create_all()
    finally:
        await database.dispose()

    print("✓ Database initialized successfully!")
    print("✓ All tables created")


if __name__ == "__main__":
    asyncio.run(init_db(reset="--reset" in sys.argv[1:]))
