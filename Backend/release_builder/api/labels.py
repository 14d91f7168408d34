from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import List

from release_builder.services.database import get_db
from release_builder.models.label import Label
from release_builder.models.user import User
from release_builder.models.user_role import AppRole
from release_builder.schemas.label import LabelCreate, LabelResponse
from release_builder.core.security import get_current_user, require_role
from release_builder.core.exceptions import DuplicateError, ValidationFailed

router = APIRouter()


@router.get("/labels/", response_model=List[LabelResponse])
async def list_labels(db: AsyncSession = Depends(get_db), current_user: User = Depends(get_current_user)):
    result = await db.execute(select(Label).order_by(Label.name))
    return result.scalars().all()


@router.post("/labels/", response_model=LabelResponse, status_code=status.HTTP_201_CREATED)
async def create_label(
    label_data: LabelCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    roles: List[AppRole] = Depends(require_role(AppRole.LABEL_ADMIN, AppRole.SYSTEM_ADMIN)),
):
    name = label_data.name.strip()
    if not name:
        raise ValidationFailed(["Please enter a label name"])

    # Check if the label already exists
    result = await db.execute(select(Label).where(Label.name == name))
    if result.scalar_one_or_none():
        raise DuplicateError("Label", name)

    label = Label(name=name, created_by=current_user.id)
    db.add(label)
    await db.commit()
    await db.refresh(label)
    return label
