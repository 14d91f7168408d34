import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from release_builder.core.constants import AUDIO_BUCKET, VIDEO_BUCKET
from release_builder.core.exceptions import ValidationFailed
from release_builder.core.security import get_current_roles, get_current_user
from release_builder.models.release import ReleaseType
from release_builder.models.user import User
from release_builder.models.user_role import AppRole
from release_builder.schemas.release import ReleaseResponse
from release_builder.services.database import get_db
from release_builder.services.release_service import ReleaseService
from release_builder.services.storage import LocalStorage, StorageError, get_storage, object_name
from release_builder.services.validation import validate_artwork_file, validate_video_file

logger = logging.getLogger(__name__)

router = APIRouter()


async def _store(storage: LocalStorage, bucket: str, path: str, data: bytes, content_type) -> str:
    try:
        stored = await storage.upload(bucket, path, data, content_type)
    except StorageError as e:
        logger.error(f"Failed to store {bucket}/{path}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not store the uploaded file")
    return stored.public_url


@router.post("/releases/{release_id}/artwork", response_model=ReleaseResponse)
async def upload_artwork(
    release_id: uuid.UUID,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    """
    Cover artwork, or the thumbnail of a music video. JPG or PNG, square,
    at least 3000x3000 pixels. The file is checked before it is stored.
    """
    service = ReleaseService(db)
    release = await service.get_release_for(release_id, current_user, roles)
    service.ensure_editable(release)

    data = await file.read()
    filename = file.filename or ""
    validate_artwork_file(filename, data)

    url = await _store(storage, AUDIO_BUCKET, object_name(filename, prefix="artwork"), data, file.content_type)
    return await service.update_fields(release, {"artwork_url": url})


@router.delete("/releases/{release_id}/artwork", response_model=ReleaseResponse)
async def remove_artwork(
    release_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    service = ReleaseService(db)
    release = await service.get_release_for(release_id, current_user, roles)
    return await service.update_fields(release, {"artwork_url": None})


@router.post("/releases/{release_id}/video", response_model=ReleaseResponse)
async def upload_video(
    release_id: uuid.UUID,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    service = ReleaseService(db)
    release = await service.get_release_for(release_id, current_user, roles)
    service.ensure_editable(release)
    if release.release_type != ReleaseType.MUSIC_VIDEO.value:
        raise ValidationFailed(["Videos can only be added to music video releases"])

    filename = file.filename or ""
    validate_video_file(filename)
    data = await file.read()

    url = await _store(storage, VIDEO_BUCKET, object_name(filename, prefix="videos"), data, file.content_type)
    return await service.update_fields(release, {"video_url": url})


@router.delete("/releases/{release_id}/video", response_model=ReleaseResponse)
async def remove_video(
    release_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    service = ReleaseService(db)
    release = await service.get_release_for(release_id, current_user, roles)
    return await service.update_fields(release, {"video_url": None})
