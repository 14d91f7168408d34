import uuid
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from release_builder.core.security import get_current_roles, get_current_user
from release_builder.models.release import Release
from release_builder.models.user import User
from release_builder.models.user_role import AppRole
from release_builder.models.wizard import WizardSession
from release_builder.schemas.release import ReleaseResponse
from release_builder.schemas.wizard import (
    DraftResponse,
    OverviewResponse,
    SectionView,
    SubmitResponse,
    WizardSessionResponse,
)
from release_builder.services.database import get_db
from release_builder.services.wizard import WizardController, WizardSection, sections_for

router = APIRouter()


def get_wizard_controller(db: AsyncSession = Depends(get_db)) -> WizardController:
    return WizardController(db)


def session_response(session: WizardSession, release: Release) -> WizardSessionResponse:
    return WizardSessionResponse(
        id=session.id,
        release_id=release.id,
        release_type=release.release_type,
        sections=[section.value for section in sections_for(release.release_type)],
        current_section=session.current_section,
        visited_sections=list(session.visited_sections or []),
        submitted_at=session.submitted_at,
    )


@router.post("/wizard/releases/{release_id}", response_model=WizardSessionResponse, status_code=status.HTTP_201_CREATED)
async def start_wizard(
    release_id: uuid.UUID,
    controller: WizardController = Depends(get_wizard_controller),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    session, release = await controller.start(release_id, current_user, roles)
    return session_response(session, release)


@router.get("/wizard/{session_id}", response_model=WizardSessionResponse)
async def get_wizard_session(
    session_id: uuid.UUID,
    controller: WizardController = Depends(get_wizard_controller),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    session, release = await controller.get_session(session_id, current_user, roles)
    return session_response(session, release)


@router.get("/wizard/{session_id}/sections/{section}", response_model=SectionView)
async def get_section(
    session_id: uuid.UUID,
    section: WizardSection,
    controller: WizardController = Depends(get_wizard_controller),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    """Initial values of a section: release row, then session draft, then saved values."""
    return await controller.section_view(session_id, section, current_user, roles)


@router.put("/wizard/{session_id}/drafts/{section}", response_model=DraftResponse)
async def autosave_section(
    session_id: uuid.UUID,
    section: WizardSection,
    values: Dict[str, Any] = Body(...),
    controller: WizardController = Depends(get_wizard_controller),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    key, merged = await controller.record_draft(session_id, section, values, current_user, roles)
    return DraftResponse(section=section.value, key=key.value, values=merged)


@router.post("/wizard/{session_id}/sections/{section}/save", response_model=WizardSessionResponse)
async def save_and_continue(
    session_id: uuid.UUID,
    section: WizardSection,
    values: Dict[str, Any] = Body(default={}),
    controller: WizardController = Depends(get_wizard_controller),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    session, release = await controller.save_section(session_id, section, values, current_user, roles)
    return session_response(session, release)


@router.post("/wizard/{session_id}/goto/{section}", response_model=WizardSessionResponse)
async def go_to_section(
    session_id: uuid.UUID,
    section: WizardSection,
    controller: WizardController = Depends(get_wizard_controller),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    session, release = await controller.go_to(session_id, section, current_user, roles)
    return session_response(session, release)


@router.get("/wizard/{session_id}/overview", response_model=OverviewResponse)
async def get_overview(
    session_id: uuid.UUID,
    controller: WizardController = Depends(get_wizard_controller),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    return await controller.overview(session_id, current_user, roles)


@router.post("/wizard/{session_id}/submit", response_model=SubmitResponse)
async def submit_release(
    session_id: uuid.UUID,
    controller: WizardController = Depends(get_wizard_controller),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(get_current_roles),
):
    session, release = await controller.submit(session_id, current_user, roles)
    return SubmitResponse(
        release=ReleaseResponse.model_validate(release),
        session=session_response(session, release),
    )
