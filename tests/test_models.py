"""
Tests for the daily usage document models and the ORM table (STORY-002).

Tests verify:
- camelCase aliases on dump; either spelling accepted on input.
- UsageEntry is immutable.
- find_room lookup.
- DailyUsageDocument columns and types.

CHANGELOG:
- 2026-10-13: Add DailyUsageDocument column tests (STORY-007)
- 2026-10-12: Initial creation (STORY-002)

TODO:
- None
"""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import JSON, DateTime, Text, inspect

from wattlog.db.models import DailyUsageDocument
from wattlog.models import (
    DailyUsageSummary,
    DeviceInfo,
    LayoutRoom,
    RoomUsage,
    UsageEntry,
    UsageStats,
)

_NOW = datetime(2026, 10, 15, 12, 0, tzinfo=UTC)


def _entry() -> UsageEntry:
    return UsageEntry(
        entry_id="e1",
        device_id="d1",
        device_name="Fan",
        wattage=75,
        start_time="22:00",
        end_time="02:00",
        duration=4.0,
        power_used=0.3,
        timestamp=_NOW,
    )


class TestAliases:
    """Tests for the camelCase document shape."""

    def test_entry_dumps_camel_case(self) -> None:
        doc = _entry().model_dump(by_alias=True)
        assert set(doc) == {
            "entryId", "deviceId", "deviceName", "wattage", "startTime",
            "endTime", "duration", "powerUsed", "timestamp",
        }

    def test_device_accepts_camel_case_input(self) -> None:
        device = DeviceInfo.model_validate(
            {"deviceId": "d1", "deviceName": "TV", "wattage": 120},
        )
        assert device.device_id == "d1"
        assert device.wattage == 120.0

    def test_device_accepts_snake_case_input(self) -> None:
        device = DeviceInfo(device_id="d1", device_name="TV", wattage=120)
        assert device.device_name == "TV"

    def test_summary_round_trips_through_json(self) -> None:
        summary = DailyUsageSummary(
            date="2026-10-15",
            user_id="u1",
            rooms=[RoomUsage(room_id="r1", room_name="Bedroom", entries=[_entry()], total_power_used=0.3)],
            total_daily_usage=0.3,
            created_at=_NOW,
            updated_at=_NOW,
        )
        raw = summary.model_dump_json(by_alias=True)
        assert '"totalDailyUsage":0.3' in raw
        assert DailyUsageSummary.model_validate_json(raw) == summary

    def test_stats_dump_trend_percentage_alias(self) -> None:
        doc = UsageStats(today=1.0, trend="up", trend_percentage=12.5).model_dump(by_alias=True)
        assert doc["trendPercentage"] == 12.5
        assert doc["weeklyAverage"] == 0.0

    def test_layout_room_nests_devices_and_windows(self) -> None:
        room = LayoutRoom.model_validate({
            "roomId": "r1",
            "roomName": "Kitchen",
            "devices": [{
                "deviceId": "d1",
                "deviceName": "Fridge",
                "wattage": 150,
                "usage": [{"start": "00:00", "end": "23:59", "totalHours": 23.98}],
            }],
        })
        assert room.devices[0].usage[0].total_hours == 23.98


class TestUsageEntry:
    """Tests for entry immutability."""

    def test_entry_is_frozen(self) -> None:
        entry = _entry()
        with pytest.raises(PydanticValidationError):
            entry.power_used = 9.9


class TestFindRoom:
    """Tests for DailyUsageSummary.find_room."""

    def test_finds_room_by_id(self) -> None:
        summary = DailyUsageSummary(
            date="2026-10-15",
            user_id="u1",
            rooms=[
                RoomUsage(room_id="r1", room_name="A"),
                RoomUsage(room_id="r2", room_name="B"),
            ],
            created_at=_NOW,
            updated_at=_NOW,
        )
        assert summary.find_room("r2").room_name == "B"
        assert summary.find_room("r3") is None


class TestDailyUsageDocumentTable:
    """Tests for the daily_usage ORM table."""

    def test_table_name(self) -> None:
        assert DailyUsageDocument.__tablename__ == "daily_usage"

    def test_column_names(self) -> None:
        mapper = inspect(DailyUsageDocument)
        column_names = {col.key for col in mapper.column_attrs}
        assert column_names == {"doc_id", "user_id", "date", "document", "updated_at"}

    def test_doc_id_is_text_primary_key(self) -> None:
        col = DailyUsageDocument.__table__.columns["doc_id"]
        assert isinstance(col.type, Text)
        assert col.primary_key is True

    def test_document_is_json(self) -> None:
        col = DailyUsageDocument.__table__.columns["document"]
        assert isinstance(col.type, JSON)

    def test_updated_at_is_timestamptz(self) -> None:
        col = DailyUsageDocument.__table__.columns["updated_at"]
        assert isinstance(col.type, DateTime)
        assert col.type.timezone is True

    def test_all_columns_not_nullable(self) -> None:
        for col in DailyUsageDocument.__table__.columns:
            assert col.nullable is False, f"{col.name} should be NOT NULL"

    def test_user_id_is_indexed(self) -> None:
        assert DailyUsageDocument.__table__.columns["user_id"].index is True
