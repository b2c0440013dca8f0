"""
Time and energy arithmetic for usage entries.

Pure functions: no I/O, no clock access. Clock times are wall-clock
``HH:MM`` strings; energy is reported in kWh rounded to 2 decimals.

Overnight rule: an end time numerically less than or equal to the start
time is always read as occurring on the next calendar day. As a result
``duration("08:00", "08:00")`` is ``24.0``; rejecting equal times is the
job of the entry-creation layer, not of this module.

CHANGELOG:
- 2026-10-18: Drop format_time; labels are built for EnergyProfile only (STORY-013)
- 2026-10-14: Add layout_energy, estimate_cost and display helpers (STORY-009)
- 2026-10-12: Initial creation (STORY-003)

TODO:
- None
"""

import re
from collections.abc import Iterable

from wattlog.errors import ValidationError
from wattlog.models import LayoutDevice, LayoutRoom

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

MINUTES_PER_DAY = 24 * 60


def parse_clock(value: str) -> int:
    """Parse an ``HH:MM`` clock time into minutes since midnight.

    Args:
        value: Clock time, hour 0-23 (one or two digits), minute 00-59.

    Returns:
        Minutes since midnight.

    Raises:
        ValidationError: If *value* is not a valid clock time.
    """
    match = _CLOCK_RE.match(value) if isinstance(value, str) else None
    if match is None:
        raise ValidationError(f"Invalid time: {value!r}. Expected HH:MM.")

    hour = int(match.group(1))
    minute = int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValidationError(f"Invalid time: {value!r}. Expected HH:MM.")
    return hour * 60 + minute


def duration(start: str, end: str) -> float:
    """Hours between two clock times, wrapping past midnight.

    Args:
        start: Start time, ``HH:MM``.
        end: End time, ``HH:MM``. Values ``<= start`` fall on the next day.

    Returns:
        Duration in hours, rounded to 2 decimals. Always > 0.
    """
    start_minutes = parse_clock(start)
    end_minutes = parse_clock(end)

    if end_minutes <= start_minutes:
        end_minutes += MINUTES_PER_DAY

    return round((end_minutes - start_minutes) / 60, 2)


def energy(wattage_w: float, hours: float) -> float:
    """Energy in kWh for a device drawing *wattage_w* for *hours*.

    Returns:
        ``round(wattage_w * hours / 1000, 2)``, never negative.
    """
    return max(round(wattage_w * hours / 1000, 2), 0.0)


def room_energy(devices: Iterable[LayoutDevice]) -> float:
    """Total kWh of a room's devices over each device's own usage windows."""
    total = 0.0
    for device in devices:
        for window in device.usage:
            total += energy(device.wattage, window.total_hours)
    return total


def layout_energy(rooms: Iterable[LayoutRoom]) -> float:
    """Total kWh of every room in a layout."""
    return sum(room_energy(room.devices) for room in rooms)


def estimate_cost(kwh: float, tariff_per_kwh: float) -> float:
    """Cost of *kwh* at a single flat tariff, rounded to 2 decimals."""
    return round(kwh * tariff_per_kwh, 2)


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def format_kwh(kwh: float) -> str:
    """Format energy for display, e.g. ``"1.2 kWh"``."""
    return f"{kwh:.1f} kWh"


def format_cost(cost: float, currency: str = "Rs") -> str:
    """Format a cost for display, e.g. ``"Rs 120"``."""
    return f"{currency} {cost:.0f}"

