"""
Input rules checked before anything is uploaded or written.

Each check either returns a list of human readable messages or raises
`ValidationFailed` carrying that list; no structured error objects.
"""
import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from PIL import Image, UnidentifiedImageError

from release_builder.core.constants import (
    ARTWORK_EXTENSIONS,
    ARTWORK_MIN_DIMENSION,
    AUDIO_EXTENSION,
    AUDIO_MIME_TYPE,
    RELEASE_FORMATS,
    RELEASE_TYPES,
    VIDEO_EXTENSIONS,
)
from release_builder.core.exceptions import ValidationFailed
from release_builder.models.release import ReleaseType
from release_builder.models.user_role import AppRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageDimensions:
    width: int
    height: int


def file_extension(filename: Optional[str]) -> str:
    """Lower-cased extension including the dot, or "" when there is none."""
    if not filename or "." not in filename:
        return ""
    return "." + filename.rsplit(".", 1)[1].lower()


# --- Media ---

def check_artwork_dimensions(width: int, height: int) -> List[str]:
    if width != height or width < ARTWORK_MIN_DIMENSION or height < ARTWORK_MIN_DIMENSION:
        return [
            f"Image must be square and at least {ARTWORK_MIN_DIMENSION}x{ARTWORK_MIN_DIMENSION} pixels "
            f"(got {width}x{height})."
        ]
    return []


def read_image_dimensions(data: bytes) -> ImageDimensions:
    # Image.open only parses the header, the pixels are never decoded here
    try:
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size
    except Image.DecompressionBombError as e:
        logger.info(f"Rejected oversized image upload: {e}")
        raise ValidationFailed(["The image is too large to process. Please upload a smaller square image."])
    except UnidentifiedImageError as e:
        logger.info(f"Rejected unreadable image upload: {e}")
        raise ValidationFailed(["The uploaded file is not a readable image."])
    return ImageDimensions(width=width, height=height)


def validate_artwork_file(filename: str, data: bytes) -> ImageDimensions:
    """Artwork and video thumbnails: JPG/JPEG/PNG, square, both sides >= 3000px."""
    if file_extension(filename) not in ARTWORK_EXTENSIONS:
        raise ValidationFailed(["Please upload a JPG, JPEG, or PNG file."])
    dimensions = read_image_dimensions(data)
    errors = check_artwork_dimensions(dimensions.width, dimensions.height)
    if errors:
        raise ValidationFailed(errors)
    return dimensions


def validate_audio_file(filename: str, content_type: Optional[str]) -> None:
    """Only WAV. Duration, sample rate and the like are not inspected."""
    if content_type == AUDIO_MIME_TYPE:
        return
    if file_extension(filename) == AUDIO_EXTENSION:
        return
    raise ValidationFailed(["Only WAV files are supported"])


def validate_video_file(filename: str) -> None:
    # Size and resolution requirements are advertised but not enforced
    if file_extension(filename) not in VIDEO_EXTENSIONS:
        raise ValidationFailed(["Please upload an MP4, MOV, or AVI file."])


# --- Release creation ---

def allowed_release_types(roles: Iterable[AppRole]) -> List[str]:
    roles = set(roles)
    if AppRole.SYSTEM_ADMIN in roles or AppRole.LABEL_ADMIN in roles:
        return list(RELEASE_TYPES)
    return [ReleaseType.DIGITAL.value]


def validate_new_release(
    release_type: str,
    format: str,
    release_name: str,
    catalog_number: str,
    has_upc: bool,
    upc: Optional[str],
    roles: Iterable[AppRole],
) -> List[str]:
    values = [release_type, format, release_name, catalog_number]
    if not all(value and value.strip() for value in values):
        return ["Please fill in all required fields"]

    errors = []
    if release_type not in RELEASE_TYPES:
        errors.append(f"Unknown release type '{release_type}'")
    elif release_type not in allowed_release_types(roles):
        errors.append(f"You are not allowed to create {release_type} releases")
    if format not in RELEASE_FORMATS:
        errors.append(f"Unknown format '{format}'")
    if has_upc and not (upc and upc.strip()):
        errors.append("Please enter the UPC number or let us assign one for you")
    return errors


# --- Overview ---

def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def overview_errors(merged: Dict[str, Any], tracks: List[Dict[str, Any]]) -> List[str]:
    """Everything that blocks submission of the merged release view."""
    errors = []
    is_music_video = merged.get("release_type") == ReleaseType.MUSIC_VIDEO.value

    if _blank(merged.get("release_name")):
        errors.append("Please enter a release name")
    if _blank(merged.get("primary_artists")):
        errors.append("Please add at least one primary artist")
    if _blank(merged.get("genre")):
        errors.append("Please select a genre")
    if _blank(merged.get("metadata_language")):
        errors.append("Please select a metadata language")

    if is_music_video:
        if _blank(merged.get("artwork_url")):
            errors.append("Please upload a thumbnail")
        if _blank(merged.get("video_url")):
            errors.append("Please upload a video")
    else:
        if _blank(merged.get("artwork_url")):
            errors.append("Please upload artwork")
        if not tracks:
            errors.append("Please add at least one track")
        for index, track in enumerate(tracks, start=1):
            name = track.get("title") or f"Track {index}"
            if _blank(track.get("title")):
                errors.append(f"Track {index} needs a title")
            if _blank(track.get("p_line")):
                errors.append(f"{name} needs a ℗ line")
            if _blank(track.get("audio_url")):
                errors.append(f"{name} has no audio file")
            if not track.get("auto_assign_isrc", True) and _blank(track.get("isrc")):
                errors.append(f"{name} needs an ISRC or automatic assignment")

    if _blank(merged.get("release_date")):
        errors.append("Please pick a release date")
    if merged.get("presave_option") == "specific-date" and _blank(merged.get("presave_date")):
        errors.append("Please pick a pre-save date")

    if _blank(merged.get("selected_territories")):
        errors.append("Please select at least one territory")
    if _blank(merged.get("selected_services")):
        errors.append("Please select at least one service")

    if not is_music_video:
        if merged.get("publishing_type") == "publisher" and _blank(merged.get("publisher_name")):
            errors.append("Please enter the publisher name")

    return errors
