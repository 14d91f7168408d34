import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from release_builder.services.database import Base
from release_builder.models.release import _utcnow

class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # Invited users have no password until they confirm the invitation
    password_hash = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
