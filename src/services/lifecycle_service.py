"""
Lifecycle and aggregation queries over the bookmark table.

Everything here is a read: the triage queue, per-action listings, and the
derived "project" views. Projects have no table of their own - they are
recomputed from `topic`, `action` and `timestamp` on every call, so a topic can
show up both as an active project (its working bookmarks) and as a reference
collection (its read-later/share/untriaged bookmarks) at the same time.
"""
import logging
from datetime import datetime

from sqlalchemy import ColumnElement, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from models.bookmark import Bookmark
from schemas.bookmark import BookmarkResponse
from schemas.project import (
    ActiveProject,
    ProjectDetailResponse,
    ProjectsResponse,
    ReferenceCollection,
)
from schemas.stats import ProjectStat, SummaryStats
from services.exceptions import BookmarkNotFoundError, BookmarkValidationError
from services.utils import (
    action_filter,
    check_pagination,
    has_topic,
    is_live,
    is_reference,
    is_working,
    latest_timestamp,
    needs_triage,
    store_errors,
)
from shared.classification import (
    BookmarkAction,
    ProjectStatus,
    parse_timestamp,
    project_status,
)


class LifecycleService:
    """
    Read-only queries that classify bookmarks and derive project views.

    Stateless between calls: nothing is cached, so every result reflects the
    store as of the query. Status thresholds come from the injected settings.
    """

    def __init__(self, settings: Settings, logger: logging.Logger | None = None) -> None:
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    def status_for(self, last_updated: datetime | str | None) -> ProjectStatus:
        """Project status for a last-updated timestamp under the configured thresholds."""
        return project_status(
            last_updated,
            stale_after_days=self.settings.project_stale_after_days,
            inactive_after_days=self.settings.project_inactive_after_days,
        )

    # --- Listings ---

    async def _paginate(
        self,
        db: AsyncSession,
        condition: ColumnElement[bool],
        limit: int,
        offset: int,
        operation: str,
    ) -> tuple[list[Bookmark], int]:
        """Fetch one page of live bookmarks (newest first) plus the total match count."""
        check_pagination(limit, offset)

        with store_errors(operation, self.logger):
            count_result = await db.execute(
                select(func.count(Bookmark.id)).where(is_live(), condition),
            )
            total = count_result.scalar_one()

            result = await db.execute(
                select(Bookmark)
                .where(is_live(), condition)
                .order_by(Bookmark.timestamp.desc(), Bookmark.id.desc())
                .offset(offset)
                .limit(limit),
            )
            bookmarks = list(result.scalars().all())

        self.logger.debug(
            "%s: returned %d of %d (limit=%d, offset=%d)",
            operation, len(bookmarks), total, limit, offset,
        )
        return bookmarks, total

    async def get_triage_queue(
        self,
        db: AsyncSession,
        limit: int,
        offset: int = 0,
    ) -> tuple[list[Bookmark], int]:
        """
        Get bookmarks awaiting triage (action unset, empty, or read-later).

        Args:
            db: Database session.
            limit: Page size; must be positive (not clamped).
            offset: Number of entries to skip; must be zero or greater.

        Returns:
            Tuple of (page of bookmarks newest first, total triage count).

        Raises:
            BookmarkValidationError: If limit or offset is out of range.
        """
        return await self._paginate(db, needs_triage(), limit, offset, "get_triage_queue")

    async def get_bookmarks_by_action(
        self,
        db: AsyncSession,
        action: BookmarkAction | str,
        limit: int,
        offset: int = 0,
    ) -> tuple[list[Bookmark], int]:
        """
        Get bookmarks with the given action, newest first.

        `read-later` also matches bookmarks whose action is unset or empty.

        Raises:
            BookmarkValidationError: If the action is unknown or pagination is out of range.
        """
        try:
            parsed_action = BookmarkAction(action)
        except ValueError as e:
            raise BookmarkValidationError(f"Unknown action: {action!r}") from e

        return await self._paginate(
            db, action_filter(parsed_action), limit, offset, "get_bookmarks_by_action",
        )

    async def list_topics(self, db: AsyncSession) -> list[str]:
        """Get all distinct non-empty topics, sorted alphabetically."""
        with store_errors("list_topics", self.logger):
            result = await db.execute(
                select(distinct(Bookmark.topic))
                .where(is_live(), has_topic())
                .order_by(Bookmark.topic),
            )
            return list(result.scalars().all())

    # --- Derived project views ---

    async def _working_topic_groups(
        self,
        db: AsyncSession,
        limit: int | None = None,
    ) -> list[tuple[str, int, str | datetime | None]]:
        """(topic, count, raw last timestamp) for working topics, most recent first."""
        last_updated = latest_timestamp().label("last_updated")
        query = (
            select(Bookmark.topic, func.count(Bookmark.id).label("link_count"), last_updated)
            .where(is_live(), is_working(), has_topic())
            .group_by(Bookmark.topic)
            .order_by(last_updated.desc(), Bookmark.topic)
        )
        if limit is not None:
            query = query.limit(limit)

        result = await db.execute(query)
        return [(row.topic, row.link_count, row.last_updated) for row in result.all()]

    async def get_active_projects(self, db: AsyncSession) -> list[ActiveProject]:
        """
        Group working bookmarks by topic into active projects.

        Bookmarks without a topic are excluded. Sorted by last_updated, most
        recently touched project first.
        """
        with store_errors("get_active_projects", self.logger):
            groups = await self._working_topic_groups(db)

        return [
            ActiveProject(
                topic=topic,
                link_count=link_count,
                last_updated=parse_timestamp(raw_last_updated),
                status=self.status_for(raw_last_updated),
            )
            for topic, link_count, raw_last_updated in groups
        ]

    async def get_reference_collections(self, db: AsyncSession) -> list[ReferenceCollection]:
        """
        Group read-later, share and untriaged bookmarks by topic.

        Sorted by link count (descending), ties broken by the most recent
        bookmark. A group whose latest timestamp cannot be parsed is kept with
        last_accessed set to None.
        """
        link_count = func.count(Bookmark.id).label("link_count")
        last_accessed = latest_timestamp().label("last_accessed")

        with store_errors("get_reference_collections", self.logger):
            result = await db.execute(
                select(Bookmark.topic, link_count, last_accessed)
                .where(is_live(), is_reference(), has_topic())
                .group_by(Bookmark.topic)
                .order_by(link_count.desc(), last_accessed.desc(), Bookmark.topic),
            )
            rows = result.all()

        return [
            ReferenceCollection(
                topic=row.topic,
                link_count=row.link_count,
                last_accessed=parse_timestamp(row.last_accessed),
            )
            for row in rows
        ]

    async def get_projects(self, db: AsyncSession) -> ProjectsResponse:
        """Get both derived project views."""
        return ProjectsResponse(
            active_projects=await self.get_active_projects(db),
            reference_collections=await self.get_reference_collections(db),
        )

    async def _topic_summary(
        self,
        db: AsyncSession,
        topic: str,
        *conditions: ColumnElement[bool],
    ) -> tuple[int, str | datetime | None]:
        """Count and raw latest timestamp of live bookmarks under a topic."""
        result = await db.execute(
            select(func.count(Bookmark.id), latest_timestamp())
            .where(is_live(), Bookmark.topic == topic, *conditions),
        )
        count, last_updated = result.one()
        return count, last_updated

    async def get_project_detail(self, db: AsyncSession, topic: str) -> ProjectDetailResponse:
        """
        Get a single project (topic) with all of its bookmarks, newest first.

        Count and recency come from the topic's working bookmarks when it has
        any, otherwise from all of its bookmarks.

        Raises:
            BookmarkNotFoundError: If no live bookmark uses this topic.
        """
        if not topic or not topic.strip():
            raise BookmarkValidationError("Topic is required")
        topic = topic.strip()

        with store_errors("get_project_detail", self.logger):
            link_count, last_updated = await self._topic_summary(db, topic, is_working())
            if link_count == 0:
                link_count, last_updated = await self._topic_summary(db, topic)
            if link_count == 0:
                raise BookmarkNotFoundError(topic, "Project")

            result = await db.execute(
                select(Bookmark)
                .where(is_live(), Bookmark.topic == topic)
                .order_by(Bookmark.timestamp.desc(), Bookmark.id.desc()),
            )
            bookmarks = list(result.scalars().all())

        return ProjectDetailResponse(
            topic=topic,
            link_count=link_count,
            last_updated=parse_timestamp(last_updated),
            status=self.status_for(last_updated),
            bookmarks=[BookmarkResponse.model_validate(b) for b in bookmarks],
        )

    # --- Statistics ---

    async def _count(self, db: AsyncSession, *conditions: ColumnElement[bool]) -> int:
        """Count live bookmarks matching all conditions."""
        result = await db.execute(
            select(func.count(Bookmark.id)).where(is_live(), *conditions),
        )
        return result.scalar_one()

    async def _project_stats(self, db: AsyncSession) -> list[ProjectStat]:
        """Most recently touched working topics with their latest bookmark."""
        groups = await self._working_topic_groups(db, limit=self.settings.project_stats_limit)
        if not groups:
            return []

        topics = [topic for topic, _, _ in groups]
        ranked = (
            select(
                Bookmark.topic,
                Bookmark.url,
                Bookmark.title,
                func.row_number()
                .over(
                    partition_by=Bookmark.topic,
                    order_by=(Bookmark.timestamp.desc(), Bookmark.id.desc()),
                )
                .label("position"),
            )
            .where(is_live(), is_working(), Bookmark.topic.in_(topics))
            .subquery()
        )
        result = await db.execute(
            select(ranked.c.topic, ranked.c.url, ranked.c.title).where(ranked.c.position == 1),
        )
        latest = {row.topic: row for row in result.all()}

        stats = []
        for topic, count, raw_last_updated in groups:
            latest_row = latest.get(topic)
            stats.append(
                ProjectStat(
                    topic=topic,
                    count=count,
                    last_updated=parse_timestamp(raw_last_updated),
                    status=self.status_for(raw_last_updated),
                    latest_url=latest_row.url if latest_row else None,
                    latest_title=latest_row.title if latest_row else None,
                ),
            )
        return stats

    async def get_summary_stats(self, db: AsyncSession) -> SummaryStats:
        """
        Compute global bookmark counts.

        `needs_triage` uses the same filter as the triage queue, so it always
        equals the queue's total.
        """
        with store_errors("get_summary_stats", self.logger):
            total_bookmarks = await self._count(db)
            triage_count = await self._count(db, needs_triage())
            active_result = await db.execute(
                select(func.count(distinct(Bookmark.topic)))
                .where(is_live(), is_working(), has_topic()),
            )
            active_projects = active_result.scalar_one()
            ready_to_share = await self._count(db, action_filter(BookmarkAction.SHARE))
            archived = await self._count(db, action_filter(BookmarkAction.ARCHIVED))
            project_stats = await self._project_stats(db)

        stats = SummaryStats(
            total_bookmarks=total_bookmarks,
            needs_triage=triage_count,
            active_projects=active_projects,
            ready_to_share=ready_to_share,
            archived=archived,
            project_stats=project_stats,
        )
        self.logger.debug(
            "Summary stats: total=%d triage=%d projects=%d share=%d archived=%d",
            stats.total_bookmarks, stats.needs_triage, stats.active_projects,
            stats.ready_to_share, stats.archived,
        )
        return stats
