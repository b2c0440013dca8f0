"""
Daily summary store adapters and the backend factory.

CHANGELOG:
- 2026-10-13: Add build_store factory (STORY-006)
- 2026-10-12: Initial creation (STORY-004)

TODO:
- None
"""

from wattlog.config import Settings
from wattlog.db.session import create_engine, create_session_factory
from wattlog.store.base import DailySummaryStore, iter_dates, parse_date, summary_key
from wattlog.store.memory import InMemorySummaryStore
from wattlog.store.redis_store import RedisSummaryStore, get_redis
from wattlog.store.sql_store import SqlSummaryStore


def build_store(settings: Settings) -> DailySummaryStore:
    """Create the store selected by ``settings.STORE_BACKEND``.

    Creating a store opens no connection; Redis and SQLAlchemy both
    connect lazily on first use.
    """
    if settings.STORE_BACKEND == "redis":
        return RedisSummaryStore(
            get_redis(settings.REDIS_URL),
            prefix=settings.REDIS_KEY_PREFIX,
            max_range_days=settings.MAX_RANGE_DAYS,
        )
    if settings.STORE_BACKEND == "postgres":
        engine = create_engine(settings.DATABASE_URL)
        return SqlSummaryStore(
            create_session_factory(engine),
            engine=engine,
            max_range_days=settings.MAX_RANGE_DAYS,
        )
    return InMemorySummaryStore(max_range_days=settings.MAX_RANGE_DAYS)


__all__ = [
    "DailySummaryStore",
    "InMemorySummaryStore",
    "RedisSummaryStore",
    "SqlSummaryStore",
    "build_store",
    "get_redis",
    "iter_dates",
    "parse_date",
    "summary_key",
]
