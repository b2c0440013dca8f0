"""
Usage aggregation engine.

Turns logged device windows into per-room and per-day running totals
and serves the derived dashboard reads (stats, trend series, category
breakdown). The service holds no state between calls besides its store,
timezone and clock, so one instance per process is enough and tests can
inject an in-memory store and a fixed clock.

Write path (``add_entry`` / ``delete_entry``) is read-modify-write on a
single daily document: validate, read, merge, write back. Nothing locks
the document between the read and the write, so two concurrent writers
for the same user and day can lose one update (last ``put`` wins).
Store failures on writes propagate as ``StorageError``; the operation
is then not applied.

Read path: aggregate reads never raise for store failures. A day that
cannot be read counts as a day with no usage, and trend series always
have their full length.

CHANGELOG:
- 2026-10-18: Fixed windows bypass the range cap; profile labels (STORY-013)
- 2026-10-15: Add get_energy_profile and yearly trend (STORY-010)
- 2026-10-14: Add stats, trends and category breakdown (STORY-008)
- 2026-10-13: Initial creation (STORY-005)

TODO:
- None
"""

import asyncio
import calendar
import logging
import math
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta, tzinfo

from pydantic import ValidationError as PydanticValidationError

from wattlog.errors import ValidationError
from wattlog.models import (
    CategoryBreakdown,
    DailyUsageSummary,
    DeviceInfo,
    EnergyProfile,
    RoomUsage,
    UsageEntry,
    UsageStats,
)
from wattlog.services import analytics
from wattlog.services.energy import (
    duration,
    energy,
    estimate_cost,
    format_cost,
    format_kwh,
    parse_clock,
)
from wattlog.services.ids import generate_id
from wattlog.store.base import DailySummaryStore, parse_date

logger = logging.getLogger(__name__)

WEEKLY_TREND_DAYS = 7
MONTHLY_TREND_WEEKS = 4
YEARLY_TREND_MONTHS = 6
DEFAULT_BREAKDOWN_DAYS = 7


def _round_kwh(value: float) -> float:
    """Round a running kWh total to 2 decimals, folding -0.0 into 0.0."""
    return max(round(value, 2), 0.0) + 0.0


def _require_id(name: str, value: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} must be a non-empty string.")


class UsageService:
    """Stateless usage aggregation engine over a daily summary store.

    Args:
        store: Daily summary store adapter.
        tz: Timezone that defines the user's calendar day.
        clock: Returns the current aware datetime. Defaults to UTC now.
        tariff_per_kwh: Flat tariff for cost figures.
        currency: Currency label reported with cost figures.
    """

    def __init__(
        self,
        store: DailySummaryStore,
        *,
        tz: tzinfo = UTC,
        clock: Callable[[], datetime] | None = None,
        tariff_per_kwh: float = 0.0,
        currency: str = "Rs",
    ) -> None:
        self._store = store
        self._tz = tz
        self._clock = clock or (lambda: datetime.now(UTC))
        self._tariff_per_kwh = tariff_per_kwh
        self._currency = currency

    @property
    def store(self) -> DailySummaryStore:
        """The underlying daily summary store."""
        return self._store

    def today(self) -> date:
        """Current calendar day in the configured timezone."""
        return self._clock().astimezone(self._tz).date()

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    async def add_entry(
        self,
        user_id: str,
        room_id: str,
        room_name: str,
        device: DeviceInfo | dict,
        start_time: str,
        end_time: str,
        day: str | None = None,
    ) -> UsageEntry:
        """Log one device usage window and fold it into the daily totals.

        Args:
            user_id: Owner of the usage data.
            room_id: Room the device was used in.
            room_name: Room name snapshot (used when the bucket is new).
            device: Device snapshot: id, name, wattage (W).
            start_time: Start, ``HH:MM``.
            end_time: End, ``HH:MM``; at or before start means next day.
            day: Calendar day ``YYYY-MM-DD``; defaults to today.

        Returns:
            The created entry.

        Raises:
            ValidationError: Invalid ids, wattage, times or date. Nothing
                is read or written.
            StorageError: The store read or write failed; the entry is
                not added.
        """
        _require_id("user_id", user_id)
        _require_id("room_id", room_id)
        if isinstance(device, dict):
            try:
                device = DeviceInfo.model_validate(device)
            except PydanticValidationError as exc:
                raise ValidationError(f"Invalid device: {exc}") from exc
        _require_id("device_id", device.device_id)

        if not math.isfinite(device.wattage) or device.wattage <= 0:
            raise ValidationError(
                f"Wattage must be a positive number (got {device.wattage})."
            )
        if parse_clock(start_time) == parse_clock(end_time):
            raise ValidationError(
                f"Start and end time are equal ({start_time}); "
                "an entry must cover a non-empty window."
            )

        if day is None:
            day = self.today().isoformat()
        else:
            day = parse_date(day).isoformat()

        hours = duration(start_time, end_time)
        now = self._clock()
        entry = UsageEntry(
            entry_id=generate_id(),
            device_id=device.device_id,
            device_name=device.device_name,
            wattage=device.wattage,
            start_time=start_time,
            end_time=end_time,
            duration=hours,
            power_used=energy(device.wattage, hours),
            timestamp=now,
        )

        summary = await self._store.get(user_id, day)
        if summary is None:
            summary = DailyUsageSummary(
                date=day,
                user_id=user_id,
                rooms=[
                    RoomUsage(
                        room_id=room_id,
                        room_name=room_name,
                        entries=[entry],
                        total_power_used=entry.power_used,
                    ),
                ],
                total_daily_usage=entry.power_used,
                created_at=now,
                updated_at=now,
            )
        else:
            room = summary.find_room(room_id)
            if room is None:
                summary.rooms.append(
                    RoomUsage(
                        room_id=room_id,
                        room_name=room_name,
                        entries=[entry],
                        total_power_used=entry.power_used,
                    )
                )
            else:
                room.entries.append(entry)
                room.total_power_used = _round_kwh(
                    room.total_power_used + entry.power_used
                )
            summary.total_daily_usage = _round_kwh(
                summary.total_daily_usage + entry.power_used
            )
            summary.updated_at = now

        await self._store.put(user_id, day, summary)
        logger.info(
            "Added entry %s (%s kWh) for user %s on %s; day total %s kWh",
            entry.entry_id, entry.power_used, user_id, day,
            summary.total_daily_usage,
        )
        return entry

    async def delete_entry(
        self, user_id: str, day: str, room_id: str, entry_id: str,
    ) -> None:
        """Remove one entry and roll its energy out of the totals.

        Idempotent: a missing document, room or entry is a no-op. A room
        left without entries is removed; a document left without rooms is
        deleted rather than written back empty.

        Raises:
            ValidationError: Malformed day.
            StorageError: The store read, write or delete failed.
        """
        day = parse_date(day).isoformat()

        summary = await self._store.get(user_id, day)
        if summary is None:
            return

        room = summary.find_room(room_id)
        if room is None:
            return

        index = next(
            (i for i, e in enumerate(room.entries) if e.entry_id == entry_id),
            None,
        )
        if index is None:
            return

        removed = room.entries.pop(index)
        room.total_power_used = _round_kwh(room.total_power_used - removed.power_used)
        summary.total_daily_usage = _round_kwh(
            summary.total_daily_usage - removed.power_used
        )
        if not room.entries:
            summary.rooms.remove(room)
        summary.updated_at = self._clock()

        if not summary.rooms:
            await self._store.delete(user_id, day)
            logger.info(
                "Deleted entry %s; removed empty document for user %s on %s",
                entry_id, user_id, day,
            )
            return

        await self._store.put(user_id, day, summary)
        logger.info(
            "Deleted entry %s for user %s on %s; day total %s kWh",
            entry_id, user_id, day, summary.total_daily_usage,
        )

    # ------------------------------------------------------------------
    # Direct reads
    # ------------------------------------------------------------------

    async def get_daily_usage(
        self, user_id: str, day: str,
    ) -> DailyUsageSummary | None:
        """Daily summary, or None when nothing was logged that day.

        Raises:
            ValidationError: Malformed day.
            StorageError: The store read failed.
        """
        return await self._store.get(user_id, parse_date(day).isoformat())

    async def get_usage_range(
        self, user_id: str, start: str, end: str,
    ) -> list[DailyUsageSummary]:
        """Present summaries from *start* to *end* inclusive, best effort."""
        return await self._store.get_range(user_id, start, end)

    # ------------------------------------------------------------------
    # Aggregate reads (degrade, never raise for store failures)
    # ------------------------------------------------------------------

    async def _day_total(self, user_id: str, day: date) -> float:
        try:
            summary = await self._store.get(user_id, day.isoformat())
        except Exception:
            logger.warning(
                "Could not read usage for user %s on %s; counting as 0",
                user_id, day, exc_info=True,
            )
            return 0.0
        return summary.total_daily_usage if summary is not None else 0.0

    async def _range_total(self, user_id: str, start: date, end: date) -> float:
        try:
            summaries = await self._store.read_window(user_id, start, end)
        except Exception:
            logger.warning(
                "Could not read usage for user %s from %s to %s; counting as 0",
                user_id, start, end, exc_info=True,
            )
            return 0.0
        return analytics.sum_usage(summaries)

    async def get_usage_stats(self, user_id: str) -> UsageStats:
        """Today, yesterday, weekly average, monthly estimate and trend."""
        today = self.today()
        today_total, yesterday_total = await asyncio.gather(
            self._day_total(user_id, today),
            self._day_total(user_id, today - timedelta(days=1)),
        )

        week_totals = None
        try:
            week = await self._store.read_window(
                user_id, today - timedelta(days=WEEKLY_TREND_DAYS - 1), today,
            )
            week_totals = [summary.total_daily_usage for summary in week]
        except Exception:
            logger.warning(
                "Weekly read failed for user %s; using fallback estimates",
                user_id, exc_info=True,
            )

        return analytics.build_stats(today_total, yesterday_total, week_totals)

    async def get_weekly_trend(self, user_id: str) -> list[float]:
        """Daily totals for the last 7 days, oldest first, today last."""
        today = self.today()
        days = [
            today - timedelta(days=offset)
            for offset in range(WEEKLY_TREND_DAYS - 1, -1, -1)
        ]
        totals = await asyncio.gather(*(self._day_total(user_id, d) for d in days))
        return list(totals)

    async def get_monthly_trend(self, user_id: str) -> list[float]:
        """Weekly totals over the trailing 28 days, oldest week first."""
        today = self.today()
        buckets = []
        for week in range(MONTHLY_TREND_WEEKS - 1, -1, -1):
            end = today - timedelta(days=7 * week)
            buckets.append((end - timedelta(days=6), end))
        totals = await asyncio.gather(
            *(self._range_total(user_id, start, end) for start, end in buckets)
        )
        return list(totals)

    async def get_yearly_trend(self, user_id: str) -> list[float]:
        """Calendar month totals for the last 6 months, current month last."""
        today = self.today()
        months = []
        for back in range(YEARLY_TREND_MONTHS - 1, -1, -1):
            year, month = today.year, today.month - back
            while month <= 0:
                month += 12
                year -= 1
            _, last_day = calendar.monthrange(year, month)
            months.append((date(year, month, 1), date(year, month, last_day)))
        totals = await asyncio.gather(
            *(self._range_total(user_id, start, end) for start, end in months)
        )
        return list(totals)

    async def get_category_breakdown(
        self, user_id: str, days: int = DEFAULT_BREAKDOWN_DAYS,
    ) -> CategoryBreakdown:
        """Integer percentage of energy per device category.

        The window runs from ``today - days`` to today inclusive.

        Raises:
            ValidationError: *days* is negative or the window is longer
                than the store accepts.
        """
        if isinstance(days, bool) or not isinstance(days, int) or days < 0:
            raise ValidationError(f"days must be a non-negative integer (got {days!r}).")

        today = self.today()
        start = today - timedelta(days=days)
        self._store.check_span(start, today)
        return await self._window_breakdown(user_id, start, today)

    async def _window_breakdown(
        self, user_id: str, start: date, end: date,
    ) -> CategoryBreakdown:
        try:
            summaries = await self._store.read_window(user_id, start, end)
        except Exception:
            logger.warning(
                "Category breakdown read failed for user %s; returning zeros",
                user_id, exc_info=True,
            )
            return analytics.empty_breakdown()
        return analytics.category_breakdown(summaries)

    async def get_energy_profile(self, user_id: str) -> EnergyProfile | None:
        """Dashboard roll-up, or None when the user has no usage at all.

        Built only from degrading reads, so store failures turn into zeros
        (and possibly None) rather than errors.
        """
        today = self.today()
        stats, last_7_days, last_4_weeks, breakdown = await asyncio.gather(
            self.get_usage_stats(user_id),
            self.get_weekly_trend(user_id),
            self.get_monthly_trend(user_id),
            self._window_breakdown(
                user_id, today - timedelta(days=DEFAULT_BREAKDOWN_DAYS), today,
            ),
        )

        has_data = (
            stats.today > 0
            or stats.yesterday > 0
            or stats.weekly_average > 0
            or stats.monthly_total > 0
            or any(v > 0 for v in last_7_days)
            or any(v > 0 for v in last_4_weeks)
            or any(v > 0 for v in breakdown.values())
        )
        if not has_data:
            return None

        today_cost = estimate_cost(stats.today, self._tariff_per_kwh)
        monthly_cost = estimate_cost(stats.monthly_total, self._tariff_per_kwh)
        return EnergyProfile(
            user_id=user_id,
            average_daily_kwh=stats.weekly_average,
            last_7_days=last_7_days,
            last_4_weeks=last_4_weeks,
            monthly_total_kwh=stats.monthly_total,
            today_cost=today_cost,
            monthly_cost=monthly_cost,
            currency=self._currency,
            average_daily_label=format_kwh(stats.weekly_average),
            today_cost_label=format_cost(today_cost, self._currency),
            monthly_cost_label=format_cost(monthly_cost, self._currency),
        )
