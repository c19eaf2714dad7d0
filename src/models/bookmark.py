"""Bookmark model for storing captured links and their triage state."""
from datetime import datetime

from sqlalchemy import JSON, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, UtcTimestamp, utc_now


class Bookmark(Base):
    """
    Bookmark model - stores URLs with triage metadata.

    `action` is NULL until the bookmark is triaged; NULL, '' and 'read-later' are
    the same state for every query. `topic` is a free-form grouping key that acts
    as an informal project name.
    """

    __tablename__ = "bookmarks"
    __table_args__ = (
        # Aggregations group by topic within an action
        Index("ix_bookmarks_action_topic", "action", "topic"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)

    action: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    topic: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    share_to: Mapped[str | None] = mapped_column(String(255), nullable=True)

    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    custom_properties: Mapped[dict[str, str]] = mapped_column(
        JSON, nullable=False, default=dict,
    )

    # Creation time; never updated after insert. Unreadable stored values load as None.
    timestamp: Mapped[datetime | None] = mapped_column(
        UtcTimestamp(),
        nullable=False,
        index=True,
        default=utc_now,
    )

    # Soft delete timestamp
    deleted_at: Mapped[datetime | None] = mapped_column(
        UtcTimestamp(), nullable=True, default=None, index=True,
    )
