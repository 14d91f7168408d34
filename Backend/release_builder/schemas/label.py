import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict
from typing import Optional


class LabelCreate(BaseModel):
    name: str


class LabelResponse(BaseModel):
    id: UUID
    name: str
    created_by: Optional[UUID] = None
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
