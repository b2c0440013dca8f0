"""
SQLAlchemy ORM models for the PostgreSQL daily usage store.

One row per daily usage document. The full document is kept as JSON in
``document``; ``user_id`` and ``date`` are denormalized for ad-hoc queries
and housekeeping.

CHANGELOG:
- 2026-10-13: Initial creation (STORY-007)

TODO:
- None
"""

import datetime

from sqlalchemy import JSON, DateTime, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all wattlog ORM models."""

    pass


class DailyUsageDocument(Base):
    """Persisted daily usage summary for one user and one calendar day.

    Attributes:
        doc_id: Composite key ``f"{user_id}_{date}"``.
        user_id: Owner of the document.
        date: Calendar day, ``YYYY-MM-DD``.
        document: Summary in its camelCase JSON shape.
        updated_at: Time of the last write.
    """

    __tablename__ = "daily_usage"

    doc_id: Mapped[str] = mapped_column(Text, primary_key=True, nullable=False)
    user_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    date: Mapped[str] = mapped_column(Text, nullable=False)
    document: Mapped[dict] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation of the DailyUsageDocument."""
        return f"DailyUsageDocument(doc_id={self.doc_id!r})"
