import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from release_builder.core.security import get_current_roles, get_current_user, require_role
from release_builder.models.release import Release, ReleaseStatus
from release_builder.models.user import User
from release_builder.models.user_role import AppRole
from release_builder.schemas.release import (
    CatalogEntry,
    RejectRequest,
    ReleaseCreate,
    ReleaseDetailResponse,
    ReleaseResponse,
    ReleaseUpdate,
    TakedownConfirm,
    TakedownIntentResponse,
    UpcAssignment,
)
from release_builder.schemas.track import TrackResponse
from release_builder.services.database import get_db
from release_builder.services.release_service import (
    ReleaseService,
    format_artists,
    get_release_service,
    release_actions,
)
from release_builder.services.track_service import TrackService

router = APIRouter()


def get_service(db: AsyncSession = Depends(get_db)) -> ReleaseService:
    return get_release_service(db)


def catalog_entry(release: Release, user: User, roles: List[AppRole]) -> CatalogEntry:
    return CatalogEntry(
        **ReleaseResponse.model_validate(release).model_dump(),
        artists_display=format_artists(release.primary_artists, release.featured_artists),
        actions=release_actions(release, user, roles),
    )


@router.post("/releases/", response_model=ReleaseResponse, status_code=status.HTTP_201_CREATED)
async def create_release(
    release_data: ReleaseCreate,
    service: ReleaseService = Depends(get_service),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    return await service.create_release(release_data, current_user, roles)


@router.get("/releases/", response_model=List[CatalogEntry])
async def list_catalog(
    status_filter: Optional[ReleaseStatus] = Query(None, alias="status"),
    service: ReleaseService = Depends(get_service),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    """
    The catalog, newest first. Moderators get the moderation queue; everyone
    else gets their own releases, optionally filtered by status.
    """
    releases = await service.list_catalog(current_user, roles, status_filter)
    return [catalog_entry(release, current_user, roles) for release in releases]


# Declared before /releases/{release_id} so the literal paths win
@router.get("/releases/released", response_model=List[CatalogEntry])
async def list_released(
    service: ReleaseService = Depends(get_service),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(require_role(AppRole.MODERATOR)),
):
    releases = await service.list_by_status(ReleaseStatus.SENT_TO_STORES)
    return [catalog_entry(release, current_user, roles) for release in releases]


@router.get("/releases/taken-down", response_model=List[CatalogEntry])
async def list_taken_down(
    service: ReleaseService = Depends(get_service),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(require_role(AppRole.MODERATOR)),
):
    releases = await service.list_by_status(ReleaseStatus.TAKEN_DOWN)
    return [catalog_entry(release, current_user, roles) for release in releases]


@router.get("/releases/{release_id}", response_model=ReleaseDetailResponse)
async def get_release(
    release_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    service: ReleaseService = Depends(get_service),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    release = await service.get_release_for(release_id, current_user, roles)
    # Tracks are fetched explicitly, the relationship is never lazy loaded
    tracks = await TrackService(db).list_tracks(release.id)
    return ReleaseDetailResponse(
        **ReleaseResponse.model_validate(release).model_dump(),
        tracks=[TrackResponse.model_validate(track) for track in tracks],
    )


@router.patch("/releases/{release_id}", response_model=ReleaseResponse)
async def update_release(
    release_id: uuid.UUID,
    release_data: ReleaseUpdate,
    service: ReleaseService = Depends(get_service),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    release = await service.get_release_for(release_id, current_user, roles)
    return await service.update_fields(release, release_data.model_dump(exclude_unset=True))


@router.post("/releases/{release_id}/edit", response_model=ReleaseResponse)
async def open_release_for_edit(
    release_id: uuid.UUID,
    service: ReleaseService = Depends(get_service),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    """Edit entry point. A release that is live in stores goes back to moderation."""
    return await service.open_for_edit(release_id, current_user, roles)


@router.post("/releases/{release_id}/approve", response_model=ReleaseResponse)
async def approve_release(
    release_id: uuid.UUID,
    service: ReleaseService = Depends(get_service),
    roles: List[AppRole] = Depends(get_current_roles),
):
    return await service.approve(release_id, roles)


@router.post("/releases/{release_id}/reject", response_model=ReleaseResponse)
async def reject_release(
    release_id: uuid.UUID,
    rejection: RejectRequest,
    service: ReleaseService = Depends(get_service),
    roles: List[AppRole] = Depends(get_current_roles),
):
    return await service.reject(release_id, rejection.reason, roles)


@router.put("/releases/{release_id}/upc", response_model=ReleaseResponse)
async def assign_upc(
    release_id: uuid.UUID,
    assignment: UpcAssignment,
    service: ReleaseService = Depends(get_service),
    roles: List[AppRole] = Depends(get_current_roles),
):
    return await service.assign_upc(release_id, assignment.upc, roles)


@router.post("/releases/{release_id}/takedown/intent", response_model=TakedownIntentResponse)
async def request_takedown(
    release_id: uuid.UUID,
    service: ReleaseService = Depends(get_service),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    """First step of a take-down. Nothing changes until it is confirmed with the password."""
    token, expires_in = await service.takedown_intent(release_id, current_user, roles)
    return TakedownIntentResponse(release_id=release_id, confirmation_token=token, expires_in_seconds=expires_in)


@router.post("/releases/{release_id}/takedown", response_model=ReleaseResponse)
async def confirm_takedown(
    release_id: uuid.UUID,
    confirmation: TakedownConfirm,
    service: ReleaseService = Depends(get_service),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    return await service.take_down(
        release_id,
        confirmation.confirmation_token,
        confirmation.password,
        current_user,
        roles,
    )
