"""
Pydantic models for daily usage documents and derived analytics.

Python attributes are snake_case; the persisted and JSON shape uses the
camelCase field names of the daily usage document (``entryId``,
``totalDailyUsage``, ...). Always dump with ``by_alias=True`` when writing
to a store so documents stay readable by other clients of the namespace.

CHANGELOG:
- 2026-10-18: Add display labels to EnergyProfile (STORY-013)
- 2026-10-14: Add layout registry shapes and EnergyProfile (STORY-009)
- 2026-10-12: Initial creation (STORY-002)

TODO:
- None
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Trend = Literal["up", "down", "stable"]

# Category name -> integer percentage of window energy.
CategoryBreakdown = dict[str, int]


class _CamelModel(BaseModel):
    """Base model with camelCase aliases; accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Registry tuples supplied by the caller
# ---------------------------------------------------------------------------


class DeviceInfo(_CamelModel):
    """Device identity snapshot taken when an entry is logged.

    Attributes:
        device_id: Registry identifier of the device.
        device_name: Display name, also used for category classification.
        wattage: Rated power draw in watts.
    """

    device_id: str
    device_name: str
    wattage: float


class RoomInfo(_CamelModel):
    """Room identity snapshot."""

    room_id: str
    room_name: str


class DeviceUsageWindow(_CamelModel):
    """One planned usage window of a layout device."""

    start: str
    end: str
    total_hours: float


class LayoutDevice(DeviceInfo):
    """Device as stored in a home layout, with its usual usage windows."""

    usage: list[DeviceUsageWindow] = Field(default_factory=list)


class LayoutRoom(RoomInfo):
    """Room as stored in a home layout."""

    devices: list[LayoutDevice] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Persisted daily document
# ---------------------------------------------------------------------------


class UsageEntry(_CamelModel):
    """One logged interval of one device in one room on one day.

    Immutable once created; edits are a delete followed by a new entry.

    Attributes:
        entry_id: Opaque unique identifier.
        device_id: Device identifier at logging time.
        device_name: Device name at logging time.
        wattage: Device wattage at logging time (W).
        start_time: Wall-clock start, ``HH:MM``.
        end_time: Wall-clock end, ``HH:MM`` (may be on the next day).
        duration: Hours between start and end, 2 decimals.
        power_used: Energy in kWh, ``round(wattage * duration / 1000, 2)``.
        timestamp: Creation instant.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True,
    )

    entry_id: str
    device_id: str
    device_name: str
    wattage: float
    start_time: str
    end_time: str
    duration: float
    power_used: float
    timestamp: datetime


class RoomUsage(_CamelModel):
    """All entries for one room on one day, with the running room total."""

    room_id: str
    room_name: str
    entries: list[UsageEntry] = Field(default_factory=list)
    total_power_used: float = 0.0


class DailyUsageSummary(_CamelModel):
    """Unit of persistence, keyed by ``(user_id, date)``.

    A summary with no rooms is never persisted; the document is deleted
    instead so that "no data" stays distinguishable from "zero usage".
    """

    date: str
    user_id: str
    rooms: list[RoomUsage] = Field(default_factory=list)
    total_daily_usage: float = 0.0
    created_at: datetime
    updated_at: datetime

    def find_room(self, room_id: str) -> RoomUsage | None:
        """Return the room bucket with *room_id*, or None."""
        for room in self.rooms:
            if room.room_id == room_id:
                return room
        return None


# ---------------------------------------------------------------------------
# Derived, never persisted
# ---------------------------------------------------------------------------


class UsageStats(_CamelModel):
    """Dashboard statistics computed fresh on every request."""

    today: float = 0.0
    yesterday: float = 0.0
    weekly_average: float = 0.0
    monthly_total: float = 0.0
    trend: Trend = "stable"
    trend_percentage: float = 0.0


class EnergyProfile(_CamelModel):
    """Roll-up of a user's recent usage for dashboards and prediction input.

    Attributes:
        user_id: Owner of the usage data.
        average_daily_kwh: Weekly average from :class:`UsageStats`.
        last_7_days: Daily totals, oldest first, today last.
        last_4_weeks: Weekly totals over the trailing 28 days.
        monthly_total_kwh: Monthly extrapolation from :class:`UsageStats`.
        today_cost: Today's energy at the configured tariff.
        monthly_cost: Monthly extrapolation at the configured tariff.
        currency: Currency label for the cost fields.
        average_daily_label: Weekly average for display, e.g. ``"2.4 kWh"``.
        today_cost_label: Today's cost for display, e.g. ``"Rs 20"``.
        monthly_cost_label: Monthly cost for display.
    """

    user_id: str
    average_daily_kwh: float
    last_7_days: list[float]
    last_4_weeks: list[float]
    monthly_total_kwh: float
    today_cost: float
    monthly_cost: float
    currency: str
    average_daily_label: str
    today_cost_label: str
    monthly_cost_label: str
