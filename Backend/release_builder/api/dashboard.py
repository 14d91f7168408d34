from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from release_builder.core.security import get_current_user
from release_builder.models.user import User
from release_builder.schemas.release import InsightsResponse, PlaceholderResponse, StatusCount
from release_builder.services.database import get_db
from release_builder.services.release_service import ReleaseService

router = APIRouter()


@router.get("/dashboard/insights", response_model=InsightsResponse)
async def get_insights(db: AsyncSession = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Release counts per status for the current user."""
    counts = await ReleaseService(db).status_counts(current_user)
    return InsightsResponse(
        status_counts=[StatusCount(status=name, count=count) for name, count in counts.items()],
        total=sum(counts.values()),
    )


@router.get("/dashboard/accounting", response_model=PlaceholderResponse)
async def get_accounting(current_user: User = Depends(get_current_user)):
    return PlaceholderResponse(section="accounting")


@router.get("/dashboard/marketing", response_model=PlaceholderResponse)
async def get_marketing(current_user: User = Depends(get_current_user)):
    return PlaceholderResponse(section="marketing")
