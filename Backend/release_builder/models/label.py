import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from release_builder.services.database import Base
from release_builder.models.release import _utcnow

class Label(Base):
    __tablename__ = "labels"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), unique=True, nullable=False)
    created_by = Column(Uuid, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
