import asyncio
import os
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Children before parents, so the script also works without CASCADE
RELEASE_TABLES = ["wizard_drafts", "wizard_sessions", "tracks", "releases"]


async def clear_database():
    """
    Connects to the database and drops the release builder tables
    (wizard sessions and drafts, tracks, releases). Users, roles and labels
    are kept. Useful for starting over during development.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        print("Error: DATABASE_URL environment variable not set.")
        return

    # A plain postgresql:// URL needs the async driver.
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://")

    print(f"Connecting to database...")
    engine = create_async_engine(database_url)
    cascade = " CASCADE" if engine.dialect.name == "postgresql" else ""

    async with engine.connect() as conn:
        print(f"Clearing release tables ({', '.join(RELEASE_TABLES)})...")
        for table in RELEASE_TABLES:
            await conn.execute(text(f"DROP TABLE IF EXISTS {table}{cascade}"))
        await conn.commit()
        print("Tables cleared successfully.")

    await engine.dispose()

if __name__ == "__main__":
    print("This script will permanently delete all releases, tracks and wizard drafts from your database.")
    confirm = input("Are you sure you want to continue? (y/n): ")
    if confirm.lower() == 'y':
        asyncio.run(clear_database())
    else:
        print("Operation cancelled.")
