from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from release_builder.services.database import get_db
from release_builder.services import role_service
from release_builder.services.auth_service import AuthService
from release_builder.models.user import User
from release_builder.models.user_role import AppRole
from release_builder.schemas.user import UserResponse, ProfileResponse, ProfileUpdate, RoleCheckResponse
from release_builder.core.security import get_current_user, get_current_roles
from release_builder.core.exceptions import NotFoundException

router = APIRouter()


@router.get("/users/me", response_model=UserResponse)
async def read_users_me(current_user: User = Depends(get_current_user)):
    """
    Fetch the current logged-in user.
    """
    return current_user


@router.get("/users/me/profile", response_model=ProfileResponse)
async def read_my_profile(db: AsyncSession = Depends(get_db), current_user: User = Depends(get_current_user)):
    profile = await AuthService(db).get_profile(current_user)
    if not profile:
        raise NotFoundException("Profile", str(current_user.id))
    return profile


@router.patch("/users/me/profile", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    # Creates the profile on first save
    return await AuthService(db).update_profile(current_user, profile_data)


@router.get("/users/me/roles", response_model=List[AppRole])
async def read_my_roles(roles: List[AppRole] = Depends(get_current_roles)):
    return roles


@router.get("/users/me/roles/{role}", response_model=RoleCheckResponse)
async def check_my_role(role: AppRole, db: AsyncSession = Depends(get_db), current_user: User = Depends(get_current_user)):
    return RoleCheckResponse(role=role, has_role=await role_service.has_role(db, current_user.id, role))
