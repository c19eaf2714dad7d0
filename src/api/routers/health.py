"""Health check endpoints."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session


logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Liveness plus the state of the bookmark store."""

    status: str
    database: str
    dialect: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """Report whether the API is up and the bookmark store answers queries."""
    dialect = db.bind.dialect.name if db.bind is not None else "unknown"
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Bookmark store health check failed (dialect=%s)", dialect)
        return HealthResponse(status="degraded", database="unhealthy", dialect=dialect)

    return HealthResponse(status="healthy", database="healthy", dialect=dialect)
