import datetime
from pydantic import BaseModel, EmailStr
from typing import List, Optional
from uuid import UUID

from release_builder.models.user_role import AppRole


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: UUID
    email: EmailStr
    is_active: bool

    class Config:
        from_attributes = True  # Allows Pydantic to convert SQLAlchemy models to JSON


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileResponse(BaseModel):
    id: UUID
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None


class SessionResponse(BaseModel):
    """What the dashboard needs after a reload: who is signed in and with which roles."""
    user: UserResponse
    roles: List[AppRole]
    profile: Optional[ProfileResponse] = None


class RoleCheckResponse(BaseModel):
    role: AppRole
    has_role: bool


class InvitationCreate(BaseModel):
    email: EmailStr
    role: AppRole = AppRole.REGULAR_USER
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class InvitationResponse(BaseModel):
    email: EmailStr
    role: AppRole
    token: str
    expires_at: datetime.datetime

    class Config:
        from_attributes = True


class InvitationStatus(BaseModel):
    email: EmailStr
    role: AppRole
    expires_at: datetime.datetime

    class Config:
        from_attributes = True


class InvitationConfirm(BaseModel):
    token: str
    password: str = ""
    password_confirmation: str = ""
