import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, List, Optional

from .release import ReleaseResponse
from .track import TrackResponse


# --- Partial updates of the sections without a release field slice of their own ---

class ArtworkSection(BaseModel):
    """
    Artwork for audio releases, the thumbnail for music videos. Both live in
    artwork_url, which only the checked upload endpoint sets.
    """
    model_config = ConfigDict(extra="forbid")


class VideoSection(BaseModel):
    # video_url is set by the video upload endpoint
    model_config = ConfigDict(extra="forbid")


class TracksSection(BaseModel):
    # Tracks are saved one by one through the track endpoints
    model_config = ConfigDict(extra="forbid")


# --- Responses ---

class WizardSessionResponse(BaseModel):
    id: UUID
    release_id: UUID
    release_type: str
    sections: List[str]
    current_section: str
    visited_sections: List[str]
    submitted_at: Optional[datetime.datetime] = None


class SectionView(BaseModel):
    section: str
    # Backend values, overlaid by saved values, overlaid by the session drafts
    values: Dict[str, Any] = {}
    tracks: List[TrackResponse] = []


class DraftResponse(BaseModel):
    section: str
    key: str
    values: Dict[str, Any]


class OverviewResponse(BaseModel):
    release: Dict[str, Any]
    tracks: List[TrackResponse] = []
    errors: List[str] = []
    can_submit: bool


class SubmitResponse(BaseModel):
    release: ReleaseResponse
    session: WizardSessionResponse
