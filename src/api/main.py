"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import bookmarks, health, projects, stats, topics
from core.config import get_settings
from db.session import create_tables
from services.exceptions import BookmarkNotFoundError, BookmarkValidationError, StoreError


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    # Startup: make sure the bookmark table exists
    await create_tables()
    logger.info("Bookmark store ready")

    yield


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        # HSTS: enforce HTTPS for 1 year, including subdomains
        response.headers["Strict-Transport-Security"] = (
            "max-age=31536000; includeSubDomains"
        )
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # API responses are never framed
        response.headers["X-Frame-Options"] = "DENY"
        return response


app_settings = get_settings()

logging.basicConfig(
    level=app_settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Link Triage API",
    description="Triage saved links into read-later, working, share, archived or irrelevant, "
    "and derive projects from their topics.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(BookmarkValidationError)
async def validation_exception_handler(
    _request: Request, exc: BookmarkValidationError,
) -> JSONResponse:
    """Reject invalid requests that passed schema validation."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(BookmarkNotFoundError)
async def not_found_exception_handler(
    _request: Request, exc: BookmarkNotFoundError,
) -> JSONResponse:
    """Report a missing (or deleted) bookmark or project."""
    return JSONResponse(status_code=404, content={"detail": f"{exc.entity_name} not found"})


@app.exception_handler(StoreError)
async def store_exception_handler(
    _request: Request, exc: StoreError,
) -> JSONResponse:
    """Hide database failure details; the cause is already logged by the service."""
    logger.error("Request failed in store operation %s", exc.operation)
    return JSONResponse(status_code=500, content={"detail": "Operation failed"})


# Security headers middleware (runs after CORS, adds headers to responses)
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(bookmarks.router)
app.include_router(projects.router)
app.include_router(topics.router)
app.include_router(stats.router)
