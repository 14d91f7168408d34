import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, List, Literal

from release_builder.core.constants import CONTRIBUTOR_ROLES

ExplicitContent = Literal["None", "Explicit", "Clean"]


def _clean(names: Optional[List[str]]) -> Optional[List[str]]:
    if names is None:
        return None
    return [name.strip() for name in names if name and name.strip()]


class Contributor(BaseModel):
    role: str
    names: List[str] = []

    @field_validator("role")
    @classmethod
    def _known_role(cls, value: str) -> str:
        if value not in CONTRIBUTOR_ROLES:
            raise ValueError(f"Unknown contributor role '{value}'")
        return value

    @field_validator("names")
    @classmethod
    def _clean_names(cls, value):
        return _clean(value)


class TrackUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    version: Optional[str] = None
    isrc: Optional[str] = None
    auto_assign_isrc: Optional[bool] = None
    lyrics_language: Optional[str] = None
    explicit_content: Optional[ExplicitContent] = None
    lyrics: Optional[str] = None
    primary_artists: Optional[List[str]] = None
    featured_artists: Optional[List[str]] = None
    remixers: Optional[List[str]] = None
    songwriters: Optional[List[str]] = None
    producers: Optional[List[str]] = None
    additional_contributors: Optional[List[Contributor]] = None
    p_line: Optional[str] = None

    @field_validator("primary_artists", "featured_artists", "remixers", "songwriters", "producers")
    @classmethod
    def _clean_names(cls, value):
        return _clean(value)


class IsrcAssignment(BaseModel):
    isrc: str


class TrackResponse(BaseModel):
    id: UUID
    release_id: UUID
    title: str
    version: Optional[str] = None
    display_name: str
    isrc: Optional[str] = None
    auto_assign_isrc: bool = True
    lyrics_language: str
    explicit_content: str
    lyrics: Optional[str] = None
    primary_artists: List[str] = []
    featured_artists: List[str] = []
    remixers: List[str] = []
    songwriters: List[str] = []
    producers: List[str] = []
    additional_contributors: List[dict] = []
    p_line: str
    audio_url: Optional[str] = None
    audio_filename: Optional[str] = None
    position: int
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class TrackNavigation(BaseModel):
    track_id: UUID
    index: int
    total: int
    has_previous: bool
    has_next: bool
