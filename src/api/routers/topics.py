"""Topic listing endpoint."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_lifecycle_service
from schemas.project import TopicsResponse
from services.lifecycle_service import LifecycleService

router = APIRouter(prefix="/topics", tags=["topics"])


@router.get("/", response_model=TopicsResponse)
async def list_topics(
    db: AsyncSession = Depends(get_async_session),
    service: LifecycleService = Depends(get_lifecycle_service),
) -> TopicsResponse:
    """Get every topic in use, sorted alphabetically."""
    topics = await service.list_topics(db)
    return TopicsResponse(topics=topics)
