import logging
import uuid
from typing import List, Literal

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from release_builder.core.exceptions import ValidationFailed
from release_builder.core.security import get_current_roles, get_current_user
from release_builder.models.release import ReleaseType
from release_builder.models.user import User
from release_builder.models.user_role import AppRole
from release_builder.schemas.track import IsrcAssignment, TrackNavigation, TrackResponse, TrackUpdate
from release_builder.services.database import get_db
from release_builder.services.release_service import ReleaseService
from release_builder.services.storage import LocalStorage, StorageError, get_storage
from release_builder.services.track_service import TrackService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/releases/{release_id}/tracks", response_model=List[TrackResponse])
async def list_tracks(
    release_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    release = await ReleaseService(db).get_release_for(release_id, current_user, roles)
    return await TrackService(db).list_tracks(release.id)


@router.post("/releases/{release_id}/tracks", response_model=TrackResponse, status_code=status.HTTP_201_CREATED)
async def upload_track(
    release_id: uuid.UUID,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    """Upload a WAV file. Each upload creates one track, appended after the existing ones."""
    release_service = ReleaseService(db)
    release = await release_service.get_release_for(release_id, current_user, roles)
    release_service.ensure_editable(release)
    if release.release_type == ReleaseType.MUSIC_VIDEO.value:
        raise ValidationFailed(["Music video releases do not have audio tracks"])

    data = await file.read()
    try:
        return await TrackService(db).create_from_upload(
            release, file.filename or "", file.content_type, data, current_user, storage
        )
    except StorageError as e:
        logger.error(f"Failed to store audio for release {release_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not store the uploaded file")


@router.get("/releases/{release_id}/tracks/{track_id}/navigate", response_model=TrackNavigation)
async def navigate_tracks(
    release_id: uuid.UUID,
    track_id: uuid.UUID,
    direction: Literal["previous", "next"] = "next",
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    release = await ReleaseService(db).get_release_for(release_id, current_user, roles)
    return await TrackService(db).navigate(release.id, track_id, direction)


@router.patch("/tracks/{track_id}", response_model=TrackResponse)
async def update_track(
    track_id: uuid.UUID,
    track_data: TrackUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    track_service = TrackService(db)
    release_service = ReleaseService(db)
    track = await track_service.get_track(track_id)
    release = await release_service.get_release_for(track.release_id, current_user, roles)
    release_service.ensure_editable(release)
    return await track_service.update_track(track, track_data.model_dump(exclude_unset=True))


@router.put("/tracks/{track_id}/isrc", response_model=TrackResponse)
async def assign_isrc(
    track_id: uuid.UUID,
    assignment: IsrcAssignment,
    db: AsyncSession = Depends(get_db),
    roles: List[AppRole] = Depends(get_current_roles),
):
    ReleaseService(db).ensure_moderator(roles)
    track_service = TrackService(db)
    track = await track_service.get_track(track_id)
    return await track_service.assign_isrc(track, assignment.isrc)
