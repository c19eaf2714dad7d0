"""Summary statistics endpoint."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_lifecycle_service
from schemas.stats import SummaryStats
from services.lifecycle_service import LifecycleService

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/summary", response_model=SummaryStats)
async def get_summary_stats(
    db: AsyncSession = Depends(get_async_session),
    service: LifecycleService = Depends(get_lifecycle_service),
) -> SummaryStats:
    """Get global counts plus the most recently touched working projects."""
    return await service.get_summary_stats(db)
