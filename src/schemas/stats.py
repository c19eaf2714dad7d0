"""Pydantic schemas for dashboard statistics."""
from datetime import datetime

from pydantic import BaseModel

from shared.classification import ProjectStatus


class ProjectStat(BaseModel):
    """Recent activity for one working topic, including its latest bookmark."""

    topic: str
    count: int
    last_updated: datetime | None
    status: ProjectStatus
    latest_url: str | None = None
    latest_title: str | None = None


class SummaryStats(BaseModel):
    """
    Global bookmark counts.

    `needs_triage` always equals the total of the triage queue.
    """

    total_bookmarks: int
    needs_triage: int
    active_projects: int  # Distinct topics with working bookmarks
    ready_to_share: int
    archived: int
    project_stats: list[ProjectStat] = []
