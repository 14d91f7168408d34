"""
Release builder wizard.

A wizard session walks one release through an ordered list of sections.
Every section owns a slice of the release fields and reports partial updates
of that slice:

- "Save and Continue" is only accepted for the current section. It writes the
  release row, the session draft and the session snapshot together and moves
  the pointer to the next section.
- Autosave only writes the session draft.
- Jumping is only allowed back to sections already visited, so the visited
  list always holds the sections passed so far, in order, once each.

Values not yet confirmed on the release row are the snapshot of saved
partials overlaid by the drafts. Saving writes into the draft too, so the
draft always holds the latest edit of a field. Section views and the overview
show the release row overlaid by those values. Submission writes them onto the
row before the release moves on.

Artwork, thumbnail and video have no writable fields here. Their URLs are only
set by the upload endpoints, after the files have been checked.
"""
import datetime
import enum
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple, Type

from fastapi import status
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from release_builder.core.exceptions import (
    ForbiddenError,
    NotFoundException,
    ReleaseBuilderException,
    ValidationFailed,
)
from release_builder.models.release import Release, ReleaseStatus, ReleaseType
from release_builder.models.user import User
from release_builder.models.user_role import AppRole
from release_builder.models.wizard import WizardSession
from release_builder.schemas.release import (
    BasicInfoFields,
    PublishingFields,
    ReleaseResponse,
    SchedulingFields,
    TerritoriesFields,
)
from release_builder.schemas.track import TrackResponse
from release_builder.schemas.wizard import ArtworkSection, TracksSection, VideoSection
from release_builder.services import status_machine
from release_builder.services.draft_store import DraftKey, DraftStore
from release_builder.services.release_service import ReleaseService
from release_builder.services.track_service import TrackService
from release_builder.services.validation import overview_errors

logger = logging.getLogger(__name__)


class WizardSection(str, enum.Enum):
    BASIC_INFO = "basic-info"
    ARTWORK = "artwork"
    TRACKS = "tracks"
    THUMBNAIL = "thumbnail"
    VIDEO = "video"
    SCHEDULING = "scheduling"
    TERRITORIES = "territories"
    PUBLISHING = "publishing"
    OVERVIEW = "overview"


AUDIO_SECTIONS = [
    WizardSection.BASIC_INFO,
    WizardSection.ARTWORK,
    WizardSection.TRACKS,
    WizardSection.SCHEDULING,
    WizardSection.TERRITORIES,
    WizardSection.PUBLISHING,
    WizardSection.OVERVIEW,
]

MUSIC_VIDEO_SECTIONS = [
    WizardSection.BASIC_INFO,
    WizardSection.THUMBNAIL,
    WizardSection.VIDEO,
    WizardSection.SCHEDULING,
    WizardSection.TERRITORIES,
    WizardSection.OVERVIEW,
]

SECTION_SCHEMAS: Dict[WizardSection, Type[BaseModel]] = {
    WizardSection.BASIC_INFO: BasicInfoFields,
    WizardSection.ARTWORK: ArtworkSection,
    WizardSection.TRACKS: TracksSection,
    WizardSection.THUMBNAIL: ArtworkSection,
    WizardSection.VIDEO: VideoSection,
    WizardSection.SCHEDULING: SchedulingFields,
    WizardSection.TERRITORIES: TerritoriesFields,
    WizardSection.PUBLISHING: PublishingFields,
}

SECTION_DRAFT_KEYS: Dict[WizardSection, DraftKey] = {
    WizardSection.BASIC_INFO: DraftKey.BASIC_INFO,
    WizardSection.TERRITORIES: DraftKey.TERRITORIES_SERVICES,
    WizardSection.PUBLISHING: DraftKey.PUBLISHING,
}

# Shown in the section view, never written through the wizard
SECTION_MEDIA_FIELDS: Dict[WizardSection, List[str]] = {
    WizardSection.ARTWORK: ["artwork_url"],
    WizardSection.THUMBNAIL: ["artwork_url"],
    WizardSection.VIDEO: ["video_url"],
}


def sections_for(release_type: str) -> List[WizardSection]:
    if release_type == ReleaseType.MUSIC_VIDEO.value:
        return list(MUSIC_VIDEO_SECTIONS)
    return list(AUDIO_SECTIONS)


def _conflict(detail: str) -> ReleaseBuilderException:
    return ReleaseBuilderException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def parse_section_update(section: WizardSection, payload: Dict[str, Any]) -> BaseModel:
    """Validate a partial update against the section's own fields. Anything else is refused."""
    schema = SECTION_SCHEMAS.get(section)
    if schema is None:
        raise _conflict(f"Section '{section.value}' has no fields to save")
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailed([
            f"{'.'.join(str(part) for part in error['loc']) or section.value}: {error['msg']}"
            for error in e.errors()
        ])


class WizardController:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.releases = ReleaseService(db_session)
        self.tracks = TrackService(db_session)
        self.drafts = DraftStore(db_session)

    # --- Session lookup ---

    async def get_session(
        self,
        session_id: uuid.UUID,
        user: User,
        roles: List[AppRole],
    ) -> Tuple[WizardSession, Release]:
        session = await self.db.get(WizardSession, session_id)
        if session is None:
            raise NotFoundException("Wizard session", str(session_id))
        if session.user_id != user.id:
            raise ForbiddenError("Not authorized to use this wizard session")
        # Ownership of the release is checked again on every call
        release = await self.releases.get_release_for(session.release_id, user, roles)
        return session, release

    def _section_in(self, release: Release, section: WizardSection) -> List[WizardSection]:
        sequence = sections_for(release.release_type)
        if section not in sequence:
            raise NotFoundException("Section", section.value)
        return sequence

    def _ensure_open(self, session: WizardSession) -> None:
        if session.submitted_at is not None:
            raise _conflict("This wizard session has already been submitted")

    def _ensure_visited(self, session: WizardSession, section: WizardSection) -> None:
        if section.value not in session.visited_sections:
            raise _conflict(f"Section '{section.value}' has not been reached yet")

    async def _pending_values(self, session: WizardSession) -> Dict[str, Any]:
        """Saved partials overlaid by the drafts, the latest edit of every field."""
        pending = dict(session.snapshot or {})
        drafts = await self.drafts.read_all(session.id)
        for key in DraftKey:
            pending.update(drafts.get(key, {}))
        return pending

    async def _persist_pending(self, session: WizardSession, release: Release) -> None:
        pending = await self._pending_values(session)
        for section in sections_for(release.release_type):
            schema = SECTION_SCHEMAS.get(section)
            if schema is None:
                continue
            values = {field: pending[field] for field in schema.model_fields if field in pending}
            if values:
                update = parse_section_update(section, values)
                await self.releases.update_fields(release, update.model_dump(exclude_unset=True), commit=False)

    # --- Operations ---

    async def start(self, release_id: uuid.UUID, user: User, roles: List[AppRole]) -> Tuple[WizardSession, Release]:
        """Open a release in the builder. Goes through the edit entry point first."""
        release = await self.releases.open_for_edit(release_id, user, roles)

        first = sections_for(release.release_type)[0]
        session = WizardSession(
            release_id=release.id,
            user_id=user.id,
            current_section=first.value,
            visited_sections=[first.value],
            snapshot={},
        )
        self.db.add(session)
        await self.db.commit()
        await self.db.refresh(session)
        logger.info(f"Started wizard session {session.id} for release {release.id}")
        return session, release

    async def section_view(
        self,
        session_id: uuid.UUID,
        section: WizardSection,
        user: User,
        roles: List[AppRole],
    ) -> Dict[str, Any]:
        session, release = await self.get_session(session_id, user, roles)
        self._section_in(release, section)
        self._ensure_visited(session, section)

        view: Dict[str, Any] = {"section": section.value, "values": {}, "tracks": []}
        schema = SECTION_SCHEMAS.get(section)
        fields = [*(schema.model_fields if schema is not None else []), *SECTION_MEDIA_FIELDS.get(section, [])]
        if fields:
            row = ReleaseResponse.model_validate(release).model_dump(mode="json")
            pending = await self._pending_values(session)
            view["values"] = {field: pending.get(field, row.get(field)) for field in fields}
        if section is WizardSection.TRACKS:
            view["tracks"] = [TrackResponse.model_validate(t) for t in await self.tracks.list_tracks(release.id)]
        return view

    async def record_draft(
        self,
        session_id: uuid.UUID,
        section: WizardSection,
        payload: Dict[str, Any],
        user: User,
        roles: List[AppRole],
    ) -> Tuple[DraftKey, Dict[str, Any]]:
        """Field level autosave. Only the session draft is written, never the release row."""
        session, release = await self.get_session(session_id, user, roles)
        self._ensure_open(session)
        self._section_in(release, section)
        self._ensure_visited(session, section)
        key = SECTION_DRAFT_KEYS.get(section)
        if key is None:
            raise _conflict(f"Section '{section.value}' does not keep drafts")

        update = parse_section_update(section, payload)
        values = await self.drafts.write(session.id, key, update.model_dump(mode="json", exclude_unset=True))
        await self.db.commit()
        return key, values

    async def save_section(
        self,
        session_id: uuid.UUID,
        section: WizardSection,
        payload: Dict[str, Any],
        user: User,
        roles: List[AppRole],
    ) -> Tuple[WizardSession, Release]:
        """Save and Continue for the current section, in one transaction."""
        session, release = await self.get_session(session_id, user, roles)
        self._ensure_open(session)
        sequence = self._section_in(release, section)
        if section.value != session.current_section:
            raise _conflict(f"Only the current section '{session.current_section}' can be saved")
        if section is WizardSection.OVERVIEW:
            raise _conflict("The overview is submitted, not saved")

        update = parse_section_update(section, payload)
        partial = update.model_dump(mode="json", exclude_unset=True)

        await self.releases.update_fields(release, update.model_dump(exclude_unset=True), commit=False)
        draft_key = SECTION_DRAFT_KEYS.get(section)
        if draft_key is not None and partial:
            await self.drafts.write(session.id, draft_key, partial)
        # Reassign, JSON columns do not track in-place mutation
        session.snapshot = {**(session.snapshot or {}), **partial}

        following = sequence[sequence.index(section) + 1]
        session.current_section = following.value
        if following.value not in session.visited_sections:
            session.visited_sections = [*session.visited_sections, following.value]

        await self.db.commit()
        await self.db.refresh(session)
        await self.db.refresh(release)
        logger.info(f"Wizard session {session.id}: saved {section.value}, now at {following.value}")
        return session, release

    async def go_to(
        self,
        session_id: uuid.UUID,
        section: WizardSection,
        user: User,
        roles: List[AppRole],
    ) -> Tuple[WizardSession, Release]:
        session, release = await self.get_session(session_id, user, roles)
        self._ensure_open(session)
        self._section_in(release, section)
        self._ensure_visited(session, section)

        session.current_section = section.value
        await self.db.commit()
        await self.db.refresh(session)
        return session, release

    async def overview(
        self,
        session_id: uuid.UUID,
        user: User,
        roles: List[AppRole],
        session: Optional[WizardSession] = None,
        release: Optional[Release] = None,
    ) -> Dict[str, Any]:
        if session is None or release is None:
            session, release = await self.get_session(session_id, user, roles)
        if WizardSection.OVERVIEW.value not in session.visited_sections:
            raise _conflict("The overview has not been reached yet")

        merged = ReleaseResponse.model_validate(release).model_dump(mode="json")
        merged.update(await self._pending_values(session))

        tracks = [
            TrackResponse.model_validate(track).model_dump(mode="json")
            for track in await self.tracks.list_tracks(release.id)
        ]
        errors = overview_errors(merged, tracks)
        return {"release": merged, "tracks": tracks, "errors": errors, "can_submit": not errors}

    async def submit(
        self,
        session_id: uuid.UUID,
        user: User,
        roles: List[AppRole],
    ) -> Tuple[WizardSession, Release]:
        session, release = await self.get_session(session_id, user, roles)
        self._ensure_open(session)
        if session.current_section != WizardSection.OVERVIEW.value:
            raise _conflict("Submit is only available from the overview")

        summary = await self.overview(session_id, user, roles, session=session, release=release)
        if summary["errors"]:
            raise ValidationFailed(summary["errors"])

        await self._persist_pending(session, release)
        # A live release opened for editing is already back in moderation
        if status_machine.current_status(release) is not ReleaseStatus.MODERATION:
            await self.releases.submit(release, commit=False)

        await self.drafts.clear(session.id)
        session.submitted_at = datetime.datetime.now(datetime.timezone.utc)
        await self.db.commit()
        await self.db.refresh(session)
        await self.db.refresh(release)
        logger.info(f"Wizard session {session.id} submitted release {release.id}")
        return session, release
