"""SQLAlchemy models for downtime window persistence.

These models map domain entities to database tables using SQLAlchemy ORM.
The schema works on both SQLite (default) and PostgreSQL.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Index, String, Text, TypeDecorator
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON


class UtcDateTime(TypeDecorator):
    """Timezone-aware datetime stored as naive UTC.

    SQLite has no native timestamp type and compares timestamps as text, so
    every value is normalized to UTC before it is written. Values read back
    are tagged with UTC.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("naive datetime cannot be stored, attach a timezone")
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Base(AsyncAttrs, DeclarativeBase):
    """Base class for all SQLAlchemy models with async support."""

    pass


class DowntimeWindowModel(Base):
    """SQLAlchemy model for the downtime_windows table.

    Represents a planned maintenance window excluded from error budget
    accounting on the clusters it affects.
    """

    __tablename__ = "downtime_windows"

    # Primary key (UUID4 string assigned by the application)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    start_time: Mapped[datetime] = mapped_column(UtcDateTime(), nullable=False)

    # NULL means open-ended
    end_time: Mapped[datetime | None] = mapped_column(UtcDateTime(), nullable=True)

    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # NULL when unset so the UNIQUE constraint only covers real IDs
    external_id: Mapped[str | None] = mapped_column(
        String(255), unique=True, nullable=True
    )
    external_link: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Ordered list of fact matchers, e.g. [{"cloud": "aws"}, {}]
    affects: Mapped[list[dict[str, str]]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list
    )

    # Audit timestamps
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        UtcDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_downtime_windows_start_time", "start_time"),
        Index("idx_downtime_windows_end_time", "end_time"),
    )
