"""
PostgreSQL-backed daily summary store.

Every operation runs in its own short session. ``put`` is an
``INSERT ... ON CONFLICT (doc_id) DO UPDATE`` so that creating and
replacing a document are the same statement (whole-document,
last-writer-wins).

CHANGELOG:
- 2026-10-13: Initial creation (STORY-007)

TODO:
- None
"""

import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, text
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from wattlog.db.models import DailyUsageDocument
from wattlog.errors import StorageError
from wattlog.models import DailyUsageSummary
from wattlog.store.base import DEFAULT_MAX_RANGE_DAYS, DailySummaryStore, summary_key

logger = logging.getLogger(__name__)


class SqlSummaryStore(DailySummaryStore):
    """:class:`DailySummaryStore` on top of SQLAlchemy async sessions.

    Args:
        session_factory: Factory producing :class:`AsyncSession` instances.
        engine: Engine behind the factory; disposed by :meth:`aclose`.
        max_range_days: Longest range accepted by ``get_range``.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
        max_range_days: int = DEFAULT_MAX_RANGE_DAYS,
    ) -> None:
        super().__init__(max_range_days)
        self._session_factory = session_factory
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine | None:
        """Engine behind the session factory, if one was given."""
        return self._engine

    async def get(self, user_id: str, day: str) -> DailyUsageSummary | None:
        doc_id = summary_key(user_id, day)
        try:
            async with self._session_factory() as session:
                row = await session.get(DailyUsageDocument, doc_id)
        except (SQLAlchemyError, OSError) as exc:
            raise StorageError(f"Database read failed for {doc_id}") from exc

        if row is None:
            return None
        try:
            return DailyUsageSummary.model_validate(row.document)
        except PydanticValidationError as exc:
            raise StorageError(f"Corrupt daily usage document {doc_id}") from exc

    async def put(
        self, user_id: str, day: str, summary: DailyUsageSummary,
    ) -> None:
        doc_id = summary_key(user_id, day)
        values = {
            "doc_id": doc_id,
            "user_id": user_id,
            "date": day,
            "document": summary.model_dump(mode="json", by_alias=True),
            "updated_at": summary.updated_at,
        }
        stmt = insert(DailyUsageDocument).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["doc_id"],
            set_={
                "document": stmt.excluded.document,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        try:
            async with self._session_factory() as session:
                await session.execute(stmt)
                await session.commit()
        except (SQLAlchemyError, OSError) as exc:
            raise StorageError(f"Database write failed for {doc_id}") from exc

    async def delete(self, user_id: str, day: str) -> None:
        doc_id = summary_key(user_id, day)
        stmt = delete(DailyUsageDocument).where(DailyUsageDocument.doc_id == doc_id)
        try:
            async with self._session_factory() as session:
                await session.execute(stmt)
                await session.commit()
        except (SQLAlchemyError, OSError) as exc:
            raise StorageError(f"Database delete failed for {doc_id}") from exc

    async def ping(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.warning("Database ping failed", exc_info=True)
            return False

    async def aclose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
