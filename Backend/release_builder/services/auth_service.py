import datetime
import logging
import secrets
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from release_builder.core.config import settings
from release_builder.core.constants import MIN_PASSWORD_LENGTH
from release_builder.core.exceptions import (
    DuplicateError,
    ForbiddenError,
    NotFoundException,
    UnauthorizedError,
    ValidationFailed,
)
from release_builder.core.security import get_password_hash, verify_password
from release_builder.models.invitation import Invitation
from release_builder.models.profile import Profile
from release_builder.models.user import User
from release_builder.models.user_role import AppRole
from release_builder.schemas.user import InvitationCreate, ProfileUpdate
from release_builder.services import role_service

logger = logging.getLogger(__name__)

# Roles a label admin may hand out; system admins may invite with any role
LABEL_ADMIN_INVITABLE = {AppRole.REGULAR_USER, AppRole.LABEL_ADMIN}


def _as_utc(value: datetime.datetime) -> datetime.datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


def full_name(first_name: Optional[str], last_name: Optional[str]) -> Optional[str]:
    name = " ".join(part.strip() for part in (first_name, last_name) if part and part.strip())
    return name or None


class AuthService:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def authenticate(self, email: str, password: str) -> User:
        user = await self.get_user_by_email(email)
        if user is None or not user.is_active or not verify_password(password, user.password_hash):
            logger.info(f"Failed sign-in for {email}")
            raise UnauthorizedError("Incorrect email or password")
        return user

    # --- Profiles ---

    async def get_profile(self, user: User) -> Optional[Profile]:
        return await self.db.get(Profile, user.id)

    async def update_profile(self, user: User, data: ProfileUpdate) -> Profile:
        profile = await self.get_profile(user)
        if profile is None:
            profile = Profile(id=user.id)
            self.db.add(profile)

        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(profile, key, value)
        profile.full_name = full_name(profile.first_name, profile.last_name)

        await self.db.commit()
        await self.db.refresh(profile)
        return profile

    # --- Invitations ---

    async def create_invitation(self, data: InvitationCreate, invited_by: User, inviter_roles: List[AppRole]) -> Invitation:
        """
        Create a user without a password plus an invitation token. The invited
        user sets the password when confirming.
        """
        if AppRole.SYSTEM_ADMIN not in inviter_roles and data.role not in LABEL_ADMIN_INVITABLE:
            raise ForbiddenError(f"Not allowed to invite users as {data.role.value}")

        email = data.email.lower()
        if await self.get_user_by_email(email):
            raise DuplicateError("Email", email)

        user = User(email=email, password_hash=None)
        self.db.add(user)
        await self.db.flush()

        self.db.add(Profile(
            id=user.id,
            first_name=data.first_name,
            last_name=data.last_name,
            full_name=full_name(data.first_name, data.last_name),
        ))
        await role_service.grant_role(self.db, user.id, data.role)

        now = datetime.datetime.now(datetime.timezone.utc)
        invitation = Invitation(
            token=secrets.token_urlsafe(32),
            email=email,
            role=data.role.value,
            user_id=user.id,
            invited_by=invited_by.id,
            expires_at=now + datetime.timedelta(hours=settings.INVITATION_EXPIRE_HOURS),
        )
        self.db.add(invitation)
        await self.db.commit()
        await self.db.refresh(invitation)
        logger.info(f"User {invited_by.id} invited {email} as {data.role.value}")
        return invitation

    async def verify_invitation(self, token: str) -> Invitation:
        result = await self.db.execute(select(Invitation).where(Invitation.token == token))
        invitation = result.scalar_one_or_none()
        if invitation is None:
            raise NotFoundException("Invitation", token)
        if invitation.accepted_at is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invitation has already been accepted")
        if _as_utc(invitation.expires_at) < datetime.datetime.now(datetime.timezone.utc):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invitation has expired")
        return invitation

    async def confirm_invitation(self, token: str, password: str, password_confirmation: str) -> User:
        errors = []
        if len(password or "") < MIN_PASSWORD_LENGTH:
            errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if password != password_confirmation:
            errors.append("Passwords do not match")
        if errors:
            raise ValidationFailed(errors)

        invitation = await self.verify_invitation(token)
        user = await self.db.get(User, invitation.user_id)
        if user is None:
            raise NotFoundException("User", str(invitation.user_id))

        user.password_hash = get_password_hash(password)
        invitation.accepted_at = datetime.datetime.now(datetime.timezone.utc)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"Invitation for {invitation.email} accepted")
        return user
