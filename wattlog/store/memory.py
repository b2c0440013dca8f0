"""
In-process daily summary store.

Keeps each document as its serialized JSON so reads and writes never
share mutable state with callers, matching the copy semantics of a
remote document store. Used by the test suite and by
``STORE_BACKEND=memory`` for local development.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-004)

TODO:
- None
"""

from wattlog.models import DailyUsageSummary
from wattlog.store.base import DEFAULT_MAX_RANGE_DAYS, DailySummaryStore, summary_key


class InMemorySummaryStore(DailySummaryStore):
    """Dict-backed :class:`DailySummaryStore`."""

    def __init__(self, max_range_days: int = DEFAULT_MAX_RANGE_DAYS) -> None:
        super().__init__(max_range_days)
        self._docs: dict[str, str] = {}

    async def get(self, user_id: str, day: str) -> DailyUsageSummary | None:
        raw = self._docs.get(summary_key(user_id, day))
        if raw is None:
            return None
        return DailyUsageSummary.model_validate_json(raw)

    async def put(
        self, user_id: str, day: str, summary: DailyUsageSummary,
    ) -> None:
        self._docs[summary_key(user_id, day)] = summary.model_dump_json(
            by_alias=True,
        )

    async def delete(self, user_id: str, day: str) -> None:
        self._docs.pop(summary_key(user_id, day), None)

    def __len__(self) -> int:
        return len(self._docs)
