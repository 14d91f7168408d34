import uuid
import datetime
from sqlalchemy import String, ForeignKey, DateTime, Integer, JSON, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from release_builder.services.database import Base
from release_builder.models.release import _utcnow

class WizardSession(Base):
    """One pass of a user through the release builder for one release."""
    __tablename__ = "wizard_sessions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    release_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("releases.id"), index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), index=True)

    current_section: Mapped[str] = mapped_column(String(32))
    # Sections in the order they were first entered
    visited_sections: Mapped[list] = mapped_column(JSON, default=list)
    # Partial updates reported by "Save and Continue", merged field by field
    snapshot: Mapped[dict] = mapped_column(JSON, default=dict)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
    submitted_at: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True))

class WizardDraft(Base):
    """Locally drafted section values, written on every field change."""
    __tablename__ = "wizard_drafts"
    __table_args__ = (UniqueConstraint("session_id", "key", name="uq_wizard_drafts_session_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("wizard_sessions.id"), index=True)
    key: Mapped[str] = mapped_column(String(64))
    payload: Mapped[dict] = mapped_column(JSON, default=dict)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
