"""Shared test fixtures: a throwaway SQLite database, users per role and an API client."""

import io
import os
import tempfile
import uuid

# Settings are read at import time, so the environment goes first
_TMP_DIR = tempfile.mkdtemp(prefix="release_builder_tests_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["STORAGE_ROOT"] = os.path.join(_TMP_DIR, "storage")
os.environ["STORAGE_PUBLIC_URL"] = "http://testserver/storage"
os.environ["DEBUG"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image

from main import app
from release_builder.core.security import create_access_token, get_password_hash
from release_builder.models.release import Release
from release_builder.models.user import User
from release_builder.models.user_role import AppRole, UserRole
from release_builder.services.database import Base, SessionLocal, engine

PASSWORD = "secret123"
# Hashing once keeps the suite fast
PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture(autouse=True)
async def database():
    """Fresh tables for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Pooled connections belong to this test's event loop
    await engine.dispose()


@pytest.fixture
async def db():
    async with SessionLocal() as session:
        yield session


async def make_user(db, email: str, *roles: AppRole) -> User:
    user = User(email=email, password_hash=PASSWORD_HASH)
    db.add(user)
    await db.flush()
    for role in roles:
        db.add(UserRole(user_id=user.id, role=role.value))
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
async def artist(db) -> User:
    return await make_user(db, "artist@example.com", AppRole.REGULAR_USER)


@pytest.fixture
async def other_artist(db) -> User:
    return await make_user(db, "other@example.com", AppRole.REGULAR_USER)


@pytest.fixture
async def moderator(db) -> User:
    return await make_user(db, "moderator@example.com", AppRole.MODERATOR)


@pytest.fixture
async def label_admin(db) -> User:
    return await make_user(db, "label@example.com", AppRole.LABEL_ADMIN)


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


async def create_release(client, user: User, **overrides) -> dict:
    """Create a release through the API and return its JSON."""
    payload = {
        "release_type": "Digital",
        "format": "Single",
        "release_name": "First Light",
        "catalog_number": "CAT-001",
        "has_upc": False,
    }
    payload.update(overrides)
    response = await client.post("/api/releases/", json=payload, headers=auth_headers(user))
    assert response.status_code == 201, response.text
    return response.json()


async def set_status(release_id: str, status: str) -> None:
    """Force a release into a status without going through the lifecycle."""
    async with SessionLocal() as session:
        release = await session.get(Release, uuid.UUID(str(release_id)))
        release.status = status
        await session.commit()


def image_bytes(width: int, height: int, fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(20, 20, 20)).save(buffer, format=fmt)
    return buffer.getvalue()


def wav_bytes() -> bytes:
    # Contents are never inspected, only the type
    return b"RIFF\x24\x00\x00\x00WAVEfmt "
