import logging
import uuid
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from release_builder.core.config import settings
from release_builder.core.constants import MUSIC_VIDEO_SERVICES, STREAMING_SERVICES, TERRITORIES
from release_builder.core.exceptions import (
    ForbiddenError,
    NotFoundException,
    ReleaseBuilderException,
    ValidationFailed,
)
from release_builder.core.security import (
    TAKEDOWN_TOKEN_PURPOSE,
    create_token,
    decode_token,
    verify_password,
)
from release_builder.models.release import Release, ReleaseStatus, ReleaseType
from release_builder.models.track import Track  # noqa: F401  (registers the Release.tracks mapper)
from release_builder.models.user import User
from release_builder.models.user_role import AppRole
from release_builder.schemas.release import ReleaseCreate
from release_builder.services import status_machine
from release_builder.services.status_machine import ReleaseTransition
from release_builder.services.validation import validate_new_release

logger = logging.getLogger(__name__)

# Clearing one of these columns stores its empty value instead of NULL
NOT_NULL_DEFAULTS = {
    "primary_artists": list,
    "featured_artists": list,
    "selected_territories": list,
    "selected_services": list,
    "deliver_featured_as_primary": bool,
}


def is_moderator(roles: List[AppRole]) -> bool:
    return AppRole.MODERATOR in roles


def is_owner(release: Release, user: User) -> bool:
    return release.created_by is not None and release.created_by == user.id


def format_artists(primary_artists: Optional[List[str]], featured_artists: Optional[List[str]]) -> str:
    primary = ", ".join(primary_artists or [])
    featured = f" feat. {', '.join(featured_artists)}" if featured_artists else ""
    return f"{primary}{featured}" if primary or featured else "No artists"


def release_actions(release: Release, user: User, roles: List[AppRole]) -> List[str]:
    """
    Catalog actions for one release. Moderators get the review tools,
    everybody else only edit and take down on their own releases.
    """
    owner = is_owner(release, user)
    moderator = is_moderator(roles)
    allowed = status_machine.available_transitions(status_machine.current_status(release), roles, owner)

    actions = []
    if owner or moderator:
        actions.append("edit")
    if moderator:
        actions.extend(["view_as_moderator", "assign_upc", "assign_isrc"])
        for transition in (ReleaseTransition.APPROVE, ReleaseTransition.REJECT):
            if transition in allowed:
                actions.append(transition.value)
    if ReleaseTransition.TAKE_DOWN in allowed:
        actions.append("take_down")
    return actions


class ReleaseService:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    # --- Reads ---

    async def get_release(self, release_id: uuid.UUID) -> Release:
        """Retrieve a release by its ID. A missing row is a not-found error, not a generic failure."""
        release = await self.db.get(Release, release_id)
        if release is None:
            logger.warning(f"Release with ID {release_id} not found")
            raise NotFoundException("Release", str(release_id))
        return release

    async def get_release_for(self, release_id: uuid.UUID, user: User, roles: List[AppRole]) -> Release:
        release = await self.get_release(release_id)
        self.ensure_can_edit(release, user, roles)
        return release

    def ensure_can_edit(self, release: Release, user: User, roles: List[AppRole]) -> None:
        if not (is_owner(release, user) or is_moderator(roles)):
            raise ForbiddenError("Not authorized to access this release")

    def ensure_editable(self, release: Release) -> None:
        if status_machine.current_status(release) is ReleaseStatus.SENT_TO_STORES:
            raise ReleaseBuilderException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Release is live in stores; open it for editing first",
            )

    def ensure_moderator(self, roles: List[AppRole]) -> None:
        if not is_moderator(roles):
            raise ForbiddenError("Only moderators can perform this action")

    async def list_catalog(
        self,
        user: User,
        roles: List[AppRole],
        status_filter: Optional[ReleaseStatus] = None,
    ) -> List[Release]:
        """Moderators see the review queue, everyone else sees their own releases."""
        query = select(Release).order_by(Release.created_at.desc())
        if is_moderator(roles):
            query = query.where(Release.status == ReleaseStatus.MODERATION.value)
        else:
            query = query.where(Release.created_by == user.id)
            if status_filter is not None:
                query = query.where(Release.status == status_filter.value)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_by_status(self, release_status: ReleaseStatus) -> List[Release]:
        result = await self.db.execute(
            select(Release)
            .where(Release.status == release_status.value)
            .order_by(Release.created_at.desc())
        )
        return list(result.scalars().all())

    async def status_counts(self, user: User) -> Dict[str, int]:
        result = await self.db.execute(
            select(Release.status, func.count(Release.id))
            .where(Release.created_by == user.id)
            .group_by(Release.status)
        )
        counts = {s.value: 0 for s in ReleaseStatus}
        for release_status, count in result.all():
            counts[release_status] = count
        return counts

    # --- Creation and field edits ---

    async def create_release(self, data: ReleaseCreate, user: User, roles: List[AppRole]) -> Release:
        errors = validate_new_release(
            data.release_type,
            data.format,
            data.release_name,
            data.catalog_number,
            data.has_upc,
            data.upc,
            roles,
        )
        if errors:
            raise ValidationFailed(errors)

        is_music_video = data.release_type == ReleaseType.MUSIC_VIDEO.value
        release = Release(
            release_name=data.release_name.strip(),
            catalog_number=data.catalog_number.strip(),
            upc=data.upc.strip() if data.has_upc else None,
            release_type=data.release_type,
            format=data.format,
            status=ReleaseStatus.IN_PROGRESS.value,
            created_by=user.id,
            primary_artists=[],
            featured_artists=[],
            # Everything is selected until the user narrows it down
            selected_territories=list(TERRITORIES),
            selected_services=list(MUSIC_VIDEO_SERVICES if is_music_video else STREAMING_SERVICES),
            presave_option="immediately",
            pricing="mid",
            publishing_type=None if is_music_video else "controlled",
        )
        self.db.add(release)
        await self.db.commit()
        await self.db.refresh(release)
        logger.info(f"Created release {release.id} '{release.release_name}' for user {user.id}")
        return release

    async def update_fields(
        self,
        release: Release,
        fields: Dict[str, Any],
        commit: bool = True,
    ) -> Release:
        """
        Write already validated fields onto a release. A release that is live in
        stores has to go through the edit entry point first.
        """
        self.ensure_editable(release)
        if "release_name" in fields and not (fields["release_name"] or "").strip():
            raise ValidationFailed(["Please enter a release name"])
        for key, value in fields.items():
            if value is None and key in NOT_NULL_DEFAULTS:
                value = NOT_NULL_DEFAULTS[key]()
            setattr(release, key, value.strip() if key == "release_name" else value)
        if commit:
            await self.db.commit()
            await self.db.refresh(release)
        else:
            await self.db.flush()
        return release

    # --- Lifecycle ---

    async def _transition(self, release: Release, transition: ReleaseTransition, reason: Optional[str] = None) -> Release:
        status_machine.apply_transition(release, transition, reason)
        await self.db.commit()
        await self.db.refresh(release)
        return release

    async def open_for_edit(self, release_id: uuid.UUID, user: User, roles: List[AppRole]) -> Release:
        """
        Edit entry point. Opening a release that is live in stores sends it back
        to moderation; this is the only place that happens.
        """
        release = await self.get_release_for(release_id, user, roles)
        if status_machine.can_transition(status_machine.current_status(release), ReleaseTransition.REOPEN):
            return await self._transition(release, ReleaseTransition.REOPEN)
        return release

    async def submit(self, release: Release, commit: bool = True) -> Release:
        status_machine.apply_transition(release, ReleaseTransition.SUBMIT)
        if commit:
            await self.db.commit()
            await self.db.refresh(release)
        return release

    async def approve(self, release_id: uuid.UUID, roles: List[AppRole]) -> Release:
        self.ensure_moderator(roles)
        release = await self.get_release(release_id)
        return await self._transition(release, ReleaseTransition.APPROVE)

    async def reject(self, release_id: uuid.UUID, reason: str, roles: List[AppRole]) -> Release:
        self.ensure_moderator(roles)
        # Refuse an empty reason before touching the database
        if not reason or not reason.strip():
            raise ValidationFailed(["Please provide a reason for rejection"])
        release = await self.get_release(release_id)
        return await self._transition(release, ReleaseTransition.REJECT, reason)

    async def assign_upc(self, release_id: uuid.UUID, upc: str, roles: List[AppRole]) -> Release:
        self.ensure_moderator(roles)
        if not upc or not upc.strip():
            raise ValidationFailed(["Please enter a UPC"])
        release = await self.get_release(release_id)
        release.upc = upc.strip()
        await self.db.commit()
        await self.db.refresh(release)
        logger.info(f"Assigned UPC {release.upc} to release {release.id}")
        return release

    # --- Take down (two steps) ---

    async def takedown_intent(self, release_id: uuid.UUID, user: User, roles: List[AppRole]) -> Tuple[str, int]:
        """First confirmation. Returns a short lived token; the release is not changed."""
        release = await self.get_release_for(release_id, user, roles)
        status_machine.next_status(status_machine.current_status(release), ReleaseTransition.TAKE_DOWN)
        lifetime = timedelta(minutes=settings.TAKEDOWN_CONFIRMATION_MINUTES)
        token = create_token(
            str(user.id),
            TAKEDOWN_TOKEN_PURPOSE,
            lifetime,
            extra_claims={"release_id": str(release.id)},
        )
        return token, int(lifetime.total_seconds())

    async def take_down(
        self,
        release_id: uuid.UUID,
        confirmation_token: str,
        password: str,
        user: User,
        roles: List[AppRole],
    ) -> Release:
        """Second confirmation: the intent token plus the user's password."""
        if not password:
            raise ValidationFailed(["Please enter your password"])
        claims = decode_token(confirmation_token, TAKEDOWN_TOKEN_PURPOSE)
        if claims.get("sub") != str(user.id) or claims.get("release_id") != str(release_id):
            raise ForbiddenError("Takedown confirmation does not match this release")
        if not verify_password(password, user.password_hash):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Incorrect password")

        release = await self.get_release_for(release_id, user, roles)
        return await self._transition(release, ReleaseTransition.TAKE_DOWN)


def get_release_service(db: AsyncSession) -> ReleaseService:
    return ReleaseService(db)
