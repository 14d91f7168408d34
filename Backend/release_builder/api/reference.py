from fastapi import APIRouter

from release_builder.core import constants

router = APIRouter()


@router.get("/reference/options")
async def get_options():
    """Fixed option lists used by the builder forms. No sign-in required."""
    return {
        "release_types": constants.RELEASE_TYPES,
        "release_formats": constants.RELEASE_FORMATS,
        "languages": constants.LANGUAGES,
        "lyrics_languages": constants.LYRICS_LANGUAGES,
        "genres": constants.GENRES,
        "subgenres": constants.SUBGENRES,
        "explicit_content": constants.EXPLICIT_CONTENT_OPTIONS,
        "contributor_roles": constants.CONTRIBUTOR_ROLES,
        "presave_options": constants.PRESAVE_OPTIONS,
        "pricing_tiers": constants.PRICING_TIERS,
        "publishing_types": constants.PUBLISHING_TYPES,
        "featured_as_primary_platforms": constants.FEATURED_AS_PRIMARY_PLATFORMS,
        "territories": constants.TERRITORIES,
        "streaming_services": constants.STREAMING_SERVICES,
        "music_video_services": constants.MUSIC_VIDEO_SERVICES,
        "video_requirements": constants.VIDEO_REQUIREMENTS,
    }
