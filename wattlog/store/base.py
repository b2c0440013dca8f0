"""
Daily summary store adapter: the persistence boundary of the usage engine.

Documents are keyed by ``(user_id, date)`` through the composite string
``f"{user_id}_{date}"``. Backends implement ``get``, ``put`` and
``delete``; range reads are built here on top of ``get`` because no
backend offers a native range query over the composite key.

Range read policy: one ``get`` per calendar day, executed concurrently.
A failed (or cancelled) single-day read is logged and the day is left
out of the result instead of failing the whole range. Callers that need
hard consistency must re-request. The ``max_range_days`` cap applies to
caller-chosen ranges (``get_range``) only; ``read_window`` serves the
engine's own fixed windows.

Writes are whole-document, last-writer-wins. There is no optimistic
concurrency token, so two concurrent read-modify-write cycles on the
same key can lose one update.

CHANGELOG:
- 2026-10-18: Split uncapped read_window from capped get_range (STORY-013)
- 2026-10-13: Reject ranges longer than max_range_days (STORY-005)
- 2026-10-12: Initial creation (STORY-004)

TODO:
- None
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from datetime import date, timedelta

from wattlog.errors import ValidationError
from wattlog.models import DailyUsageSummary

logger = logging.getLogger(__name__)

# Strict YYYY-MM-DD pattern; calendar validity is checked by date.fromisoformat.
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DEFAULT_MAX_RANGE_DAYS = 92


def summary_key(user_id: str, day: str) -> str:
    """Composite document key for a user's day."""
    return f"{user_id}_{day}"


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string.

    Raises:
        ValidationError: If *value* is not a valid calendar date.
    """
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValidationError(f"Invalid date: {value!r}. Expected YYYY-MM-DD.")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {value!r}. {exc}") from exc


def iter_dates(start: date, end: date) -> Iterator[str]:
    """Yield every ``YYYY-MM-DD`` from *start* to *end* inclusive."""
    current = start
    while current <= end:
        yield current.isoformat()
        current += timedelta(days=1)


class DailySummaryStore(ABC):
    """Abstract keyed document store for :class:`DailyUsageSummary`.

    Backends raise :class:`~wattlog.errors.StorageError` for any failure
    of the underlying store. ``get`` returning ``None`` means no entry was
    ever logged that day, which is distinct from a day with zero usage.

    Args:
        max_range_days: Longest range accepted by :meth:`get_range`.
    """

    def __init__(self, max_range_days: int = DEFAULT_MAX_RANGE_DAYS) -> None:
        self._max_range_days = max_range_days

    @abstractmethod
    async def get(self, user_id: str, day: str) -> DailyUsageSummary | None:
        """Read one document, or None when absent."""

    @abstractmethod
    async def put(
        self, user_id: str, day: str, summary: DailyUsageSummary,
    ) -> None:
        """Create or fully replace one document."""

    @abstractmethod
    async def delete(self, user_id: str, day: str) -> None:
        """Delete one document. Deleting an absent document is a no-op."""

    async def ping(self) -> bool:
        """Probe the backing store. Backends override when they have one."""
        return True

    async def aclose(self) -> None:
        """Release backend connections."""
        return None

    @property
    def max_range_days(self) -> int:
        """Longest range accepted by :meth:`get_range`."""
        return self._max_range_days

    def check_span(self, start: date, end: date) -> None:
        """Reject a caller-chosen window longer than ``max_range_days``.

        Raises:
            ValidationError: If the inclusive span exceeds the cap.
        """
        span = (end - start).days + 1
        if span > self._max_range_days:
            raise ValidationError(
                f"Range of {span} days exceeds the maximum of "
                f"{self._max_range_days} days."
            )

    async def get_range(
        self, user_id: str, start: str, end: str,
    ) -> list[DailyUsageSummary]:
        """Read every present document from *start* to *end* inclusive.

        Entry point for caller-chosen ranges: dates are validated and the
        span is capped at ``max_range_days``. See :meth:`read_window` for
        the read policy.

        Args:
            user_id: Owner of the documents.
            start: First day, ``YYYY-MM-DD``.
            end: Last day (inclusive), ``YYYY-MM-DD``.

        Returns:
            Present summaries in date order. Empty when ``start > end``.

        Raises:
            ValidationError: If a date is malformed or the range is longer
                than ``max_range_days``.
        """
        start_day = parse_date(start)
        end_day = parse_date(end)
        if start_day > end_day:
            return []
        self.check_span(start_day, end_day)
        return await self.read_window(user_id, start_day, end_day)

    async def read_window(
        self, user_id: str, start: date, end: date,
    ) -> list[DailyUsageSummary]:
        """Read the present documents of a window, without the range cap.

        Used directly by the usage engine for its own fixed windows (7-day
        stats, weekly buckets, calendar months). Days are read concurrently.
        Absent days are dropped; failed or cancelled reads are logged and
        dropped. The result is sorted ascending by date.
        """
        days = list(iter_dates(start, end))
        results = await asyncio.gather(
            *(self.get(user_id, day) for day in days),
            return_exceptions=True,
        )

        summaries = []
        for day, result in zip(days, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "Range read for user %s skipped %s: %r",
                    user_id, day, result,
                )
                continue
            if result is not None:
                summaries.append(result)

        summaries.sort(key=lambda s: s.date)
        return summaries
