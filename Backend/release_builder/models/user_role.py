import enum
import uuid
import datetime
from sqlalchemy import String, ForeignKey, DateTime, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from release_builder.services.database import Base
from release_builder.models.release import _utcnow

class AppRole(str, enum.Enum):
    REGULAR_USER = "regular_user"
    LABEL_ADMIN = "label_admin"
    MODERATOR = "moderator"
    SYSTEM_ADMIN = "system_admin"

class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), index=True)
    role: Mapped[str] = mapped_column(String(32), default=AppRole.REGULAR_USER.value)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
