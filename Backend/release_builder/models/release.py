import enum
import uuid
import datetime
from sqlalchemy import Column, String, Boolean, Date, DateTime, ForeignKey, JSON, Text, Uuid
from sqlalchemy.orm import relationship
from release_builder.services.database import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class ReleaseStatus(str, enum.Enum):
    IN_PROGRESS = "In Progress"
    READY = "Ready"
    MODERATION = "Moderation"
    SENT_TO_STORES = "Sent to Stores"
    ERROR = "Error"
    TAKEN_DOWN = "Taken Down"


class ReleaseType(str, enum.Enum):
    DIGITAL = "Digital"
    MUSIC_VIDEO = "Music Video"
    PHYSICAL = "Physical"


class Release(Base):
    __tablename__ = "releases"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Descriptive attributes
    release_name = Column(String(255), nullable=False)
    catalog_number = Column(String(64), nullable=False)  # immutable after creation
    upc = Column(String(32), nullable=True)  # user supplied at creation or assigned by a moderator
    release_type = Column(String(32), nullable=False, default=ReleaseType.DIGITAL.value)
    format = Column(String(32), nullable=True)
    genre = Column(String(64), nullable=True)
    subgenre = Column(String(64), nullable=True)
    metadata_language = Column(String(16), nullable=True)
    copyright_line = Column(String(255), nullable=True)
    label = Column(String(255), nullable=True)

    # Artist names keep insertion order and may repeat
    primary_artists = Column(JSON, nullable=False, default=list)
    featured_artists = Column(JSON, nullable=False, default=list)
    deliver_featured_as_primary = Column(Boolean, nullable=False, default=False)

    # Media
    artwork_url = Column(String, nullable=True)
    video_url = Column(String, nullable=True)

    # Scheduling
    release_date = Column(Date, nullable=True)
    sales_start_date = Column(Date, nullable=True)
    presave_option = Column(String(32), nullable=True)
    presave_date = Column(Date, nullable=True)
    pricing = Column(String(16), nullable=True)

    # Distribution
    selected_territories = Column(JSON, nullable=False, default=list)
    selected_services = Column(JSON, nullable=False, default=list)

    # Publishing
    publishing_type = Column(String(32), nullable=True)
    publisher_name = Column(String(255), nullable=True)

    # Lifecycle
    status = Column(String(32), nullable=False, default=ReleaseStatus.IN_PROGRESS.value, index=True)
    rejection_reason = Column(Text, nullable=True)
    created_by = Column(Uuid, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    # A release has many tracks. Tracks are never deleted in-app.
    tracks = relationship("Track", back_populates="release", order_by="Track.position")
