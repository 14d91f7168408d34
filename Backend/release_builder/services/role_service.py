import logging
import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from release_builder.models.user_role import AppRole, UserRole

logger = logging.getLogger(__name__)


async def get_user_roles(db: AsyncSession, user_id: uuid.UUID) -> List[AppRole]:
    """All roles held by a user. Unknown role strings in the table are skipped."""
    result = await db.execute(select(UserRole.role).where(UserRole.user_id == user_id))
    roles = []
    for value in result.scalars().all():
        try:
            roles.append(AppRole(value))
        except ValueError:
            logger.warning(f"Ignoring unknown role '{value}' for user {user_id}")
    return roles


async def has_role(db: AsyncSession, user_id: uuid.UUID, role: AppRole) -> bool:
    result = await db.execute(
        select(UserRole.id).where(UserRole.user_id == user_id, UserRole.role == role.value)
    )
    return result.first() is not None


async def grant_role(db: AsyncSession, user_id: uuid.UUID, role: AppRole) -> None:
    if await has_role(db, user_id, role):
        return
    db.add(UserRole(user_id=user_id, role=role.value))
    await db.flush()
