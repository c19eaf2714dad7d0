"""SQLAlchemy declarative base and shared column helpers."""
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, String
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator, TypeEngine

from shared.classification import parse_timestamp

# Same text layout SQLAlchemy's DateTime uses on SQLite, so existing rows still sort correctly
_SQLITE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def utc_now() -> datetime:
    """
    Current wall-clock time as a timezone-aware UTC datetime.

    Used as a Python-side column default so creation timestamps are assigned the
    same way on PostgreSQL and SQLite.
    """
    return datetime.now(UTC)


class UtcTimestamp(TypeDecorator):
    """
    Timezone-aware UTC timestamp that reads malformed stored values as None.

    PostgreSQL stores a native `timestamptz`. SQLite has no datetime type, so
    the value is kept as text and parsed here instead of by the driver; a row
    holding unreadable text loads with a None timestamp rather than failing
    the whole query.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(32))
        return dialect.type_descriptor(DateTime(timezone=True))

    def process_bind_param(self, value: datetime | str | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        parsed = parse_timestamp(value)
        if parsed is None:
            raise ValueError(f"Invalid timestamp: {value!r}")
        if dialect.name == "sqlite":
            return parsed.strftime(_SQLITE_TIMESTAMP_FORMAT)
        return parsed

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime | None:
        return parse_timestamp(value)
