import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, List, Literal

from release_builder.core.constants import TERRITORIES, STREAMING_SERVICES, MUSIC_VIDEO_SERVICES
from .track import TrackResponse

ReleaseFormat = Literal["Single", "EP", "Album/Full Length"]
PresaveOption = Literal["immediately", "specific-date", "no-presave"]
PricingTier = Literal["low", "mid", "high"]
PublishingType = Literal["controlled", "publisher", "not-published"]


def clean_names(names: Optional[List[str]]) -> Optional[List[str]]:
    """Trim free-text names and drop blank ones. Order and duplicates are kept."""
    if names is None:
        return None
    return [name.strip() for name in names if name and name.strip()]


class ReleaseCreate(BaseModel):
    # Everything defaults to empty so missing fields come back as one list of messages
    release_type: str = ""
    format: str = ""
    release_name: str = ""
    catalog_number: str = ""
    has_upc: bool = False
    upc: Optional[str] = None


# --- Field slices owned by the wizard sections ---

class BasicInfoFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    release_name: Optional[str] = None
    format: Optional[ReleaseFormat] = None
    metadata_language: Optional[str] = None
    primary_artists: Optional[List[str]] = None
    featured_artists: Optional[List[str]] = None
    deliver_featured_as_primary: Optional[bool] = None
    genre: Optional[str] = None
    subgenre: Optional[str] = None
    label: Optional[str] = None
    copyright_line: Optional[str] = None

    @field_validator("primary_artists", "featured_artists")
    @classmethod
    def _clean_artists(cls, value):
        return clean_names(value)


class SchedulingFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    release_date: Optional[datetime.date] = None
    sales_start_date: Optional[datetime.date] = None
    presave_option: Optional[PresaveOption] = None
    presave_date: Optional[datetime.date] = None
    pricing: Optional[PricingTier] = None


class TerritoriesFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    selected_territories: Optional[List[str]] = None
    selected_services: Optional[List[str]] = None

    @field_validator("selected_territories")
    @classmethod
    def _known_territories(cls, value):
        if value is None:
            return value
        unknown = [t for t in value if t not in TERRITORIES]
        if unknown:
            raise ValueError(f"Unknown territories: {', '.join(unknown)}")
        return list(dict.fromkeys(value))

    @field_validator("selected_services")
    @classmethod
    def _known_services(cls, value):
        if value is None:
            return value
        known = set(STREAMING_SERVICES) | set(MUSIC_VIDEO_SERVICES)
        unknown = [s for s in value if s not in known]
        if unknown:
            raise ValueError(f"Unknown services: {', '.join(unknown)}")
        return list(dict.fromkeys(value))


class PublishingFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    publishing_type: Optional[PublishingType] = None
    publisher_name: Optional[str] = None


class ReleaseUpdate(BasicInfoFields, SchedulingFields, TerritoriesFields, PublishingFields):
    """Fields a creator may change directly. Catalog number, UPC and status are not among them."""
    model_config = ConfigDict(extra="forbid")


class ReleaseResponse(BaseModel):
    id: UUID
    release_name: str
    catalog_number: str
    upc: Optional[str] = None
    release_type: str
    format: Optional[str] = None
    genre: Optional[str] = None
    subgenre: Optional[str] = None
    metadata_language: Optional[str] = None
    copyright_line: Optional[str] = None
    label: Optional[str] = None
    primary_artists: List[str] = []
    featured_artists: List[str] = []
    deliver_featured_as_primary: bool = False
    artwork_url: Optional[str] = None
    video_url: Optional[str] = None
    release_date: Optional[datetime.date] = None
    sales_start_date: Optional[datetime.date] = None
    presave_option: Optional[str] = None
    presave_date: Optional[datetime.date] = None
    pricing: Optional[str] = None
    selected_territories: List[str] = []
    selected_services: List[str] = []
    publishing_type: Optional[str] = None
    publisher_name: Optional[str] = None
    status: str
    rejection_reason: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class ReleaseDetailResponse(ReleaseResponse):
    tracks: List[TrackResponse] = []


class CatalogEntry(ReleaseResponse):
    artists_display: str
    # Actions the current user may take on this release
    actions: List[str] = []


class RejectRequest(BaseModel):
    reason: str = ""


class UpcAssignment(BaseModel):
    upc: str


class TakedownIntentResponse(BaseModel):
    release_id: UUID
    confirmation_token: str
    expires_in_seconds: int


class TakedownConfirm(BaseModel):
    confirmation_token: str
    password: str = ""


class StatusCount(BaseModel):
    status: str
    count: int


class InsightsResponse(BaseModel):
    status_counts: List[StatusCount]
    total: int


class PlaceholderResponse(BaseModel):
    section: str
    message: str = "Coming soon"
