"""
Redis-backed daily summary store.

Each document is a JSON string (camelCase document shape) under
``"{prefix}:{user_id}_{date}"``. ``SET`` replaces the whole value, which
gives the last-writer-wins semantics the engine expects.

CHANGELOG:
- 2026-10-13: Initial creation (STORY-006)

TODO:
- None
"""

import logging

import redis.asyncio as redis
from pydantic import ValidationError as PydanticValidationError
from redis.exceptions import RedisError

from wattlog.errors import StorageError
from wattlog.models import DailyUsageSummary
from wattlog.store.base import DEFAULT_MAX_RANGE_DAYS, DailySummaryStore, summary_key

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "daily_usage"


def get_redis(url: str) -> redis.Redis:
    """Create an async Redis client for *url*.

    The client holds a lazy connection pool; no connection is opened
    until the first command.
    """
    return redis.from_url(url)


class RedisSummaryStore(DailySummaryStore):
    """:class:`DailySummaryStore` on top of ``redis.asyncio``.

    Args:
        client: Async Redis client.
        prefix: Namespace prepended to every document key.
        max_range_days: Longest range accepted by ``get_range``.
    """

    def __init__(
        self,
        client: redis.Redis,
        prefix: str = DEFAULT_KEY_PREFIX,
        max_range_days: int = DEFAULT_MAX_RANGE_DAYS,
    ) -> None:
        super().__init__(max_range_days)
        self._client = client
        self._prefix = prefix

    def _key(self, user_id: str, day: str) -> str:
        return f"{self._prefix}:{summary_key(user_id, day)}"

    async def get(self, user_id: str, day: str) -> DailyUsageSummary | None:
        key = self._key(user_id, day)
        try:
            raw = await self._client.get(key)
        except (RedisError, OSError) as exc:
            raise StorageError(f"Redis read failed for {key}") from exc

        if raw is None:
            return None
        try:
            return DailyUsageSummary.model_validate_json(raw)
        except PydanticValidationError as exc:
            raise StorageError(f"Corrupt daily usage document at {key}") from exc

    async def put(
        self, user_id: str, day: str, summary: DailyUsageSummary,
    ) -> None:
        key = self._key(user_id, day)
        try:
            await self._client.set(key, summary.model_dump_json(by_alias=True))
        except (RedisError, OSError) as exc:
            raise StorageError(f"Redis write failed for {key}") from exc

    async def delete(self, user_id: str, day: str) -> None:
        key = self._key(user_id, day)
        try:
            await self._client.delete(key)
        except (RedisError, OSError) as exc:
            raise StorageError(f"Redis delete failed for {key}") from exc

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except Exception:
            logger.warning("Redis ping failed", exc_info=True)
            return False

    async def aclose(self) -> None:
        await self._client.aclose()
