import asyncio
import os
import sys
from dotenv import load_dotenv

# STEP 1: Set up the Python path for imports
# ------------------------------------------
# Add the 'Backend' directory to the system path so we can import from the 'release_builder' package.
backend_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'Backend'))
sys.path.append(backend_dir)

# STEP 2: Load environment variables
# ----------------------------------
# Load the .env file from the project root to get the DATABASE_URL.
project_root = os.path.dirname(backend_dir)
load_dotenv(os.path.join(project_root, ".env"))
print(" Environment loaded.")

# STEP 3: Import application modules (NOW that path and env are set)
# -----------------------------------------------------------------
from release_builder.services.database import engine, Base

# Import all models so SQLAlchemy knows about them and can create the tables.
from release_builder.models.user import User
from release_builder.models.profile import Profile
from release_builder.models.user_role import UserRole
from release_builder.models.label import Label
from release_builder.models.invitation import Invitation
from release_builder.models.release import Release
from release_builder.models.track import Track
from release_builder.models.wizard import WizardSession, WizardDraft
print(" Application modules imported successfully.")

# --- Main Table Creation Logic ---
async def create_all_tables():
    """Connects to the database and creates all tables for the imported models."""
    print("\nConnecting to the database to create tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print(" All tables created successfully!")
    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(create_all_tables())
