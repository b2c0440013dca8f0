"""
Pure reducers for usage statistics, trends and category breakdowns.

No I/O: callers read daily summaries from the store and pass totals or
summaries in. Keeping the arithmetic here lets the engine stay a thin
layer of reads and fallbacks.

Category classification is a case-insensitive substring match of the
device name against an ordered keyword list; the first matching category
wins, so "Desk Fan Light" is Lighting. Percentages use largest-remainder
rounding so a non-empty window always sums to exactly 100.

CHANGELOG:
- 2026-10-18: sum_usage always returns a float (STORY-013)
- 2026-10-15: Switch breakdown to largest-remainder rounding (STORY-011)
- 2026-10-14: Initial creation (STORY-008)

TODO:
- None
"""

import math
from collections.abc import Iterable, Sequence

from wattlog.models import CategoryBreakdown, DailyUsageSummary, Trend, UsageStats

# Day-over-day change (percent) beyond which the trend is up or down.
TREND_THRESHOLD_PCT = 5.0

# Order matters: first match wins.
CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Lighting", ("light", "lamp", "cfl", "led")),
    ("Appliances", ("fridge", "refrigerator", "washing", "microwave", "oven")),
    ("Electronics", ("tv", "computer", "laptop", "phone")),
    ("HVAC", ("ac", "heater", "fan", "hvac")),
)
FALLBACK_CATEGORY = "Other"
CATEGORIES: tuple[str, ...] = tuple(name for name, _ in CATEGORY_RULES) + (
    FALLBACK_CATEGORY,
)


def classify_device(device_name: str) -> str:
    """Return the category of a device by keyword match on its name."""
    name = device_name.lower()
    for category, keywords in CATEGORY_RULES:
        if any(keyword in name for keyword in keywords):
            return category
    return FALLBACK_CATEGORY


def empty_breakdown() -> CategoryBreakdown:
    """All categories present, all at 0 percent."""
    return {category: 0 for category in CATEGORIES}


def category_totals(summaries: Iterable[DailyUsageSummary]) -> dict[str, float]:
    """Sum entry energy (kWh) per category across *summaries*."""
    totals = {category: 0.0 for category in CATEGORIES}
    for summary in summaries:
        for room in summary.rooms:
            for entry in room.entries:
                totals[classify_device(entry.device_name)] += entry.power_used
    return totals


def to_percentages(totals: dict[str, float]) -> CategoryBreakdown:
    """Convert per-category kWh into integer percentages.

    Each share is floored, then the points still missing from 100 go to
    the categories with the largest fractional parts (ties broken by
    category order).

    Returns:
        Percentages summing to exactly 100, or all zeros when the total
        energy is zero.
    """
    grand_total = sum(totals.values())
    if grand_total <= 0:
        return empty_breakdown()

    shares = {
        category: totals.get(category, 0.0) / grand_total * 100
        for category in CATEGORIES
    }
    result = {category: math.floor(share) for category, share in shares.items()}

    missing = 100 - sum(result.values())
    by_remainder = sorted(
        CATEGORIES,
        key=lambda c: (-(shares[c] - result[c]), CATEGORIES.index(c)),
    )
    for category in by_remainder[:missing]:
        result[category] += 1
    return result


def category_breakdown(summaries: Iterable[DailyUsageSummary]) -> CategoryBreakdown:
    """Percentage of window energy per category."""
    return to_percentages(category_totals(summaries))


def sum_usage(summaries: Iterable[DailyUsageSummary]) -> float:
    """Total kWh across daily summaries."""
    return sum((summary.total_daily_usage for summary in summaries), 0.0)


def compute_trend(today: float, yesterday: float) -> tuple[Trend, float]:
    """Day-over-day trend and absolute percent change.

    A zero (or negative) baseline always yields ``("stable", 0.0)``
    regardless of today's value.
    """
    if yesterday <= 0:
        return "stable", 0.0

    change = (today - yesterday) / yesterday * 100
    if change > TREND_THRESHOLD_PCT:
        trend: Trend = "up"
    elif change < -TREND_THRESHOLD_PCT:
        trend = "down"
    else:
        trend = "stable"
    return trend, abs(change)


def build_stats(
    today: float,
    yesterday: float,
    week_totals: Sequence[float] | None,
) -> UsageStats:
    """Assemble :class:`UsageStats` from daily totals.

    Args:
        today: Today's total kWh (0 when absent).
        yesterday: Yesterday's total kWh (0 when absent).
        week_totals: Totals of the days present in the last 7 days, or
            None when the weekly read failed.

    Returns:
        UsageStats. With weekly data, ``weekly_average`` is the mean of the
        present days and ``monthly_total`` is the weekly sum times 4.
        Without it, ``weekly_average`` is today and ``monthly_total`` is
        today times 30.
    """
    if week_totals:
        weekly_sum = sum(week_totals)
        weekly_average = weekly_sum / len(week_totals)
        monthly_total = weekly_sum * 4
    else:
        weekly_average = today
        monthly_total = today * 30

    trend, trend_percentage = compute_trend(today, yesterday)
    return UsageStats(
        today=today,
        yesterday=yesterday,
        weekly_average=weekly_average,
        monthly_total=monthly_total,
        trend=trend,
        trend_percentage=trend_percentage,
    )
