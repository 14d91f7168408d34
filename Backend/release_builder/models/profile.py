from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from release_builder.services.database import Base
from release_builder.models.release import _utcnow

class Profile(Base):
    __tablename__ = "profiles"

    # One profile per user, sharing the user's id
    id = Column(Uuid, ForeignKey("users.id"), primary_key=True)
    username = Column(String(64), nullable=True)
    first_name = Column(String(128), nullable=True)
    last_name = Column(String(128), nullable=True)
    full_name = Column(String(255), nullable=True)
    avatar_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
