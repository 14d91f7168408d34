import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, JSON, Text, Uuid
from sqlalchemy.orm import relationship
from release_builder.services.database import Base
from release_builder.models.release import _utcnow

class Track(Base):
    __tablename__ = "tracks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    version = Column(String(255), nullable=True)
    isrc = Column(String(32), nullable=True)
    auto_assign_isrc = Column(Boolean, nullable=False, default=True)
    lyrics_language = Column(String(16), nullable=False, default="instrumental")
    explicit_content = Column(String(16), nullable=False, default="None")
    lyrics = Column(Text, nullable=True)

    primary_artists = Column(JSON, nullable=False, default=list)
    featured_artists = Column(JSON, nullable=False, default=list)
    remixers = Column(JSON, nullable=False, default=list)
    songwriters = Column(JSON, nullable=False, default=list)
    producers = Column(JSON, nullable=False, default=list)
    # [{"role": "Lyricist", "names": ["..."]}, ...]
    additional_contributors = Column(JSON, nullable=False, default=list)

    p_line = Column(String(255), nullable=False)
    audio_url = Column(String, nullable=True)
    audio_filename = Column(String(255), nullable=True)

    # Upload order within the release
    position = Column(Integer, nullable=False, default=0)

    created_by = Column(Uuid, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    # Link to its parent release
    release_id = Column(Uuid, ForeignKey("releases.id"), nullable=False, index=True)
    release = relationship("Release", back_populates="tracks")

    @property
    def display_name(self) -> str:
        if self.version:
            return f"{self.title} ({self.version})"
        return self.title
