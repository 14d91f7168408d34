from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from release_builder.core.security import create_access_token, get_current_roles, get_current_user, require_role
from release_builder.models.user import User
from release_builder.models.user_role import AppRole
from release_builder.schemas.user import (
    InvitationConfirm,
    InvitationCreate,
    InvitationResponse,
    InvitationStatus,
    ProfileResponse,
    SessionResponse,
    SignInRequest,
    TokenResponse,
    UserResponse,
)
from release_builder.services.auth_service import AuthService
from release_builder.services.database import get_db

router = APIRouter()


@router.post("/auth/sign-in", response_model=TokenResponse)
async def sign_in(credentials: SignInRequest, db: AsyncSession = Depends(get_db)):
    user = await AuthService(db).authenticate(credentials.email, credentials.password)
    return TokenResponse(access_token=create_access_token(user.id), user=UserResponse.model_validate(user))


@router.post("/auth/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client drops its copy
    return None


@router.get("/auth/session", response_model=SessionResponse)
async def get_session(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    """
    The signed-in user with roles and profile. Used by the dashboard to
    restore a session after a reload.
    """
    profile = await AuthService(db).get_profile(current_user)
    return SessionResponse(
        user=UserResponse.model_validate(current_user),
        roles=roles,
        profile=ProfileResponse.model_validate(profile) if profile else None,
    )


@router.post("/auth/invitations", response_model=InvitationResponse, status_code=status.HTTP_201_CREATED)
async def invite_user(
    invitation_data: InvitationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(require_role(AppRole.LABEL_ADMIN, AppRole.SYSTEM_ADMIN)),
):
    return await AuthService(db).create_invitation(invitation_data, current_user, roles)


@router.get("/auth/invitations/{token}", response_model=InvitationStatus)
async def verify_invitation(token: str, db: AsyncSession = Depends(get_db)):
    return await AuthService(db).verify_invitation(token)


@router.post("/auth/confirm-invitation", response_model=TokenResponse)
async def confirm_invitation(confirmation: InvitationConfirm, db: AsyncSession = Depends(get_db)):
    user = await AuthService(db).confirm_invitation(
        confirmation.token,
        confirmation.password,
        confirmation.password_confirmation,
    )
    return TokenResponse(access_token=create_access_token(user.id), user=UserResponse.model_validate(user))
