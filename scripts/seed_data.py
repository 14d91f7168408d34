import sys
import os
import asyncio
from datetime import date

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'Backend')))

from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(__file__), '..', '.env'))

from release_builder.core.config import settings
from release_builder.core.constants import STREAMING_SERVICES, TERRITORIES
from release_builder.core.security import get_password_hash
from release_builder.models.user import User
from release_builder.models.profile import Profile
from release_builder.models.user_role import UserRole, AppRole
from release_builder.models.label import Label
from release_builder.models.release import Release, ReleaseStatus
from release_builder.models.track import Track
from release_builder.services.database import engine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

DEMO_PASSWORD = "demo123"

async def create_demo_data():
    # Create async session
    async_session = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        # Create demo users, one per role
        users = [
            User(email="artist@example.com", password_hash=get_password_hash(DEMO_PASSWORD)),
            User(email="moderator@example.com", password_hash=get_password_hash(DEMO_PASSWORD)),
            User(email="label@example.com", password_hash=get_password_hash(DEMO_PASSWORD)),
        ]
        session.add_all(users)
        await session.flush()

        session.add_all([
            Profile(id=users[0].id, first_name="Demo", last_name="Artist", full_name="Demo Artist"),
            Profile(id=users[1].id, first_name="Demo", last_name="Moderator", full_name="Demo Moderator"),
            Profile(id=users[2].id, first_name="Demo", last_name="Label", full_name="Demo Label"),
            UserRole(user_id=users[0].id, role=AppRole.REGULAR_USER.value),
            UserRole(user_id=users[1].id, role=AppRole.MODERATOR.value),
            UserRole(user_id=users[2].id, role=AppRole.LABEL_ADMIN.value),
            Label(name=settings.DEFAULT_LABEL_NAME, created_by=users[2].id),
        ])

        # Create demo releases in different stages
        releases = [
            Release(
                release_name="Midnight Drive",
                catalog_number="AMB-001",
                release_type="Digital",
                format="Single",
                genre="Electronic",
                metadata_language="en",
                primary_artists=["Demo Artist"],
                featured_artists=[],
                selected_territories=list(TERRITORIES),
                selected_services=list(STREAMING_SERVICES),
                release_date=date(2026, 1, 16),
                presave_option="immediately",
                pricing="mid",
                publishing_type="controlled",
                status=ReleaseStatus.IN_PROGRESS.value,
                created_by=users[0].id,
            ),
            Release(
                release_name="Northern Lights",
                catalog_number="AMB-002",
                upc="123456789012",
                release_type="Digital",
                format="EP",
                genre="Pop",
                metadata_language="en",
                primary_artists=["Demo Artist"],
                featured_artists=["Guest Singer"],
                selected_territories=list(TERRITORIES),
                selected_services=list(STREAMING_SERVICES),
                release_date=date(2026, 2, 20),
                presave_option="no-presave",
                pricing="low",
                publishing_type="controlled",
                status=ReleaseStatus.MODERATION.value,
                created_by=users[0].id,
            ),
        ]
        session.add_all(releases)
        await session.flush()

        # Create demo tracks
        tracks = [
            Track(
                release_id=releases[0].id,
                title="Midnight Drive",
                p_line=f"{date.today().year} {settings.DEFAULT_LABEL_NAME}",
                position=0,
                created_by=users[0].id,
            ),
            Track(
                release_id=releases[1].id,
                title="Northern Lights",
                version="Radio Edit",
                p_line=f"{date.today().year} {settings.DEFAULT_LABEL_NAME}",
                position=0,
                created_by=users[0].id,
            ),
        ]
        session.add_all(tracks)

        # Commit all changes
        await session.commit()
        print(f"✅ Demo data created successfully! All demo users sign in with '{DEMO_PASSWORD}'.")

if __name__ == "__main__":
    asyncio.run(create_demo_data())
