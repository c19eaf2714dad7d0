"""Pydantic schemas for derived project views (active projects, reference collections)."""
from datetime import datetime

from pydantic import BaseModel

from schemas.bookmark import BookmarkResponse
from shared.classification import ProjectStatus


class ActiveProject(BaseModel):
    """A topic with at least one `working` bookmark."""

    topic: str
    link_count: int
    last_updated: datetime | None
    status: ProjectStatus


class ReferenceCollection(BaseModel):
    """
    A topic grouping read-later, share and untriaged bookmarks.

    `last_accessed` is None when the group's most recent timestamp could not be read.
    """

    topic: str
    link_count: int
    last_accessed: datetime | None


class ProjectsResponse(BaseModel):
    """Both derived project views in one response."""

    active_projects: list[ActiveProject]
    reference_collections: list[ReferenceCollection]


class ProjectDetailResponse(BaseModel):
    """A single topic with its bookmarks (newest first)."""

    topic: str
    link_count: int
    last_updated: datetime | None
    status: ProjectStatus
    bookmarks: list[BookmarkResponse]


class TopicsResponse(BaseModel):
    """Distinct non-empty topics, sorted alphabetically."""

    topics: list[str]
