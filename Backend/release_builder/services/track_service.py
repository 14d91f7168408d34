import datetime
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from release_builder.core.config import settings
from release_builder.core.constants import AUDIO_BUCKET, AUDIO_EXTENSION
from release_builder.core.exceptions import NotFoundException, ValidationFailed
from release_builder.models.release import Release
from release_builder.models.track import Track
from release_builder.models.user import User
from release_builder.schemas.track import TrackNavigation
from release_builder.services.storage import LocalStorage, object_name
from release_builder.services.validation import validate_audio_file

logger = logging.getLogger(__name__)

NOT_NULL_DEFAULTS = {
    "auto_assign_isrc": lambda: True,
    "lyrics_language": lambda: "instrumental",
    "explicit_content": lambda: "None",
    "primary_artists": list,
    "featured_artists": list,
    "remixers": list,
    "songwriters": list,
    "producers": list,
    "additional_contributors": list,
}


def default_p_line() -> str:
    return f"{datetime.date.today().year} {settings.DEFAULT_LABEL_NAME}"


def title_from_filename(filename: str) -> str:
    if filename.lower().endswith(AUDIO_EXTENSION):
        return filename[: -len(AUDIO_EXTENSION)]
    return filename


class TrackService:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_track(self, track_id: uuid.UUID) -> Track:
        track = await self.db.get(Track, track_id)
        if track is None:
            logger.warning(f"Track with ID {track_id} not found")
            raise NotFoundException("Track", str(track_id))
        return track

    async def list_tracks(self, release_id: uuid.UUID) -> List[Track]:
        """Tracks of a release in upload order."""
        result = await self.db.execute(
            select(Track)
            .where(Track.release_id == release_id)
            .order_by(Track.position, Track.created_at)
        )
        return list(result.scalars().all())

    async def create_from_upload(
        self,
        release: Release,
        filename: str,
        content_type: Optional[str],
        data: bytes,
        user: User,
        storage: LocalStorage,
    ) -> Track:
        """
        Store an uploaded WAV file and create the track for it. The file name
        (without extension) becomes the title.
        """
        validate_audio_file(filename, content_type)

        stored = await storage.upload(AUDIO_BUCKET, object_name(filename), data, content_type)

        count = await self.db.execute(select(func.count(Track.id)).where(Track.release_id == release.id))
        track = Track(
            release_id=release.id,
            title=title_from_filename(filename),
            p_line=default_p_line(),
            audio_url=stored.public_url,
            audio_filename=filename,
            position=count.scalar_one(),
            created_by=user.id,
            primary_artists=[],
            featured_artists=[],
            remixers=[],
            songwriters=[],
            producers=[],
            additional_contributors=[],
        )
        self.db.add(track)
        await self.db.commit()
        await self.db.refresh(track)
        logger.info(f"Created track {track.id} '{track.title}' on release {release.id}")
        return track

    async def update_track(self, track: Track, fields: Dict[str, Any]) -> Track:
        errors = []
        if "title" in fields and not (fields["title"] or "").strip():
            errors.append("Track title is required")
        if "p_line" in fields and not (fields["p_line"] or "").strip():
            errors.append("℗ line is required")
        if errors:
            raise ValidationFailed(errors)

        for key, value in fields.items():
            if value is None and key in NOT_NULL_DEFAULTS:
                value = NOT_NULL_DEFAULTS[key]()
            setattr(track, key, value.strip() if key in ("title", "p_line") else value)
        await self.db.commit()
        await self.db.refresh(track)
        return track

    async def assign_isrc(self, track: Track, isrc: str) -> Track:
        if not isrc or not isrc.strip():
            raise ValidationFailed(["Please enter an ISRC"])
        track.isrc = isrc.strip()
        await self.db.commit()
        await self.db.refresh(track)
        logger.info(f"Assigned ISRC {track.isrc} to track {track.id}")
        return track

    async def navigate(self, release_id: uuid.UUID, track_id: uuid.UUID, direction: str) -> TrackNavigation:
        """
        Move from `track_id` to the previous or next track of the release.
        Stops at the first and last track instead of wrapping.
        """
        tracks = await self.list_tracks(release_id)
        ids = [t.id for t in tracks]
        if track_id not in ids:
            raise NotFoundException("Track", str(track_id))

        index = ids.index(track_id)
        if direction == "previous":
            index = max(index - 1, 0)
        elif direction == "next":
            index = min(index + 1, len(ids) - 1)

        return TrackNavigation(
            track_id=ids[index],
            index=index,
            total=len(ids),
            has_previous=index > 0,
            has_next=index < len(ids) - 1,
        )
