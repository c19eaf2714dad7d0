"""Derived project views: active projects and reference collections."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_lifecycle_service
from schemas.project import (
    ActiveProject,
    ProjectDetailResponse,
    ProjectsResponse,
    ReferenceCollection,
)
from services.lifecycle_service import LifecycleService

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("/", response_model=ProjectsResponse)
async def get_projects(
    db: AsyncSession = Depends(get_async_session),
    service: LifecycleService = Depends(get_lifecycle_service),
) -> ProjectsResponse:
    """Get active projects and reference collections together."""
    return await service.get_projects(db)


@router.get("/active", response_model=list[ActiveProject])
async def get_active_projects(
    db: AsyncSession = Depends(get_async_session),
    service: LifecycleService = Depends(get_lifecycle_service),
) -> list[ActiveProject]:
    """Get topics with working bookmarks, most recently touched first."""
    return await service.get_active_projects(db)


@router.get("/references", response_model=list[ReferenceCollection])
async def get_reference_collections(
    db: AsyncSession = Depends(get_async_session),
    service: LifecycleService = Depends(get_lifecycle_service),
) -> list[ReferenceCollection]:
    """Get topics with read-later, share or untriaged bookmarks, largest first."""
    return await service.get_reference_collections(db)


@router.get("/by-topic/{topic:path}", response_model=ProjectDetailResponse)
async def get_project_detail(
    topic: str,
    db: AsyncSession = Depends(get_async_session),
    service: LifecycleService = Depends(get_lifecycle_service),
) -> ProjectDetailResponse:
    """
    Get a single project with its bookmarks.

    The topic may contain slashes and may share a name with a fixed route.
    """
    return await service.get_project_detail(db, topic)
