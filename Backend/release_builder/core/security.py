import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from release_builder.core.config import settings
from release_builder.core.exceptions import UnauthorizedError, ForbiddenError
from release_builder.models.user import User
from release_builder.models.user_role import AppRole
from release_builder.services.database import get_db
from release_builder.services import role_service

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/sign-in", auto_error=False)

ACCESS_TOKEN_PURPOSE = "access"
TAKEDOWN_TOKEN_PURPOSE = "takedown"


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_token(subject: str, purpose: str, expires_delta: timedelta, extra_claims: Optional[Dict[str, Any]] = None) -> str:
    now = datetime.now(timezone.utc)
    claims: Dict[str, Any] = {"sub": subject, "purpose": purpose, "iat": now, "exp": now + expires_delta}
    if extra_claims:
        claims.update(extra_claims)
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(user_id: uuid.UUID) -> str:
    return create_token(
        str(user_id),
        ACCESS_TOKEN_PURPOSE,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def decode_token(token: str, purpose: str) -> Dict[str, Any]:
    """Decode a token and check it was issued for `purpose`. Raises UnauthorizedError."""
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Could not validate credentials")
    if claims.get("purpose") != purpose or "sub" not in claims:
        raise UnauthorizedError("Could not validate credentials")
    return claims


async def get_current_user_optional(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    if not token:
        return None
    claims = decode_token(token, ACCESS_TOKEN_PURPOSE)
    try:
        user_id = uuid.UUID(claims["sub"])
    except ValueError:
        raise UnauthorizedError("Could not validate credentials")
    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError("Could not validate credentials")
    return user


async def get_current_user(user: Optional[User] = Depends(get_current_user_optional)) -> User:
    """Every dashboard and builder route requires an active session."""
    if user is None:
        raise UnauthorizedError("Not authenticated")
    return user


async def get_current_roles(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> List[AppRole]:
    """Role membership, looked up once per request and treated as authoritative."""
    return await role_service.get_user_roles(db, current_user.id)


def require_role(*roles: AppRole):
    """Dependency factory: the caller must hold at least one of `roles`."""
    async def _check(user_roles: List[AppRole] = Depends(get_current_roles)) -> List[AppRole]:
        if not any(role in user_roles for role in roles):
            raise ForbiddenError()
        return user_roles
    return _check
