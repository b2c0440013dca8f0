"""
Tests for the Redis daily summary store (STORY-006).

Tests verify:
- Key layout "{prefix}:{user_id}_{date}".
- Documents are written as camelCase JSON and parsed back.
- Redis errors and corrupt documents surface as StorageError.
- ping reports False instead of raising.

CHANGELOG:
- 2026-10-13: Initial creation (STORY-006)

TODO:
- None
"""

import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from wattlog.errors import StorageError
from wattlog.models import DailyUsageSummary, RoomUsage, UsageEntry
from wattlog.store.redis_store import RedisSummaryStore

_NOW = datetime(2026, 10, 15, 12, 0, tzinfo=UTC)


def _summary() -> DailyUsageSummary:
    entry = UsageEntry(
        entry_id="e1",
        device_id="d1",
        device_name="Ceiling Light",
        wattage=60,
        start_time="19:00",
        end_time="23:00",
        duration=4.0,
        power_used=0.24,
        timestamp=_NOW,
    )
    return DailyUsageSummary(
        date="2026-10-15",
        user_id="u1",
        rooms=[
            RoomUsage(room_id="r1", room_name="Living", entries=[entry], total_power_used=0.24),
        ],
        total_daily_usage=0.24,
        created_at=_NOW,
        updated_at=_NOW,
    )


@pytest.fixture()
def client() -> AsyncMock:
    """Async Redis client mock."""
    mock = AsyncMock()
    mock.get.return_value = None
    mock.ping.return_value = True
    return mock


class TestRedisSummaryStore:
    """Tests for RedisSummaryStore against a mocked client."""

    @pytest.mark.asyncio()
    async def test_get_absent_returns_none(self, client: AsyncMock) -> None:
        store = RedisSummaryStore(client)

        assert await store.get("u1", "2026-10-15") is None
        client.get.assert_awaited_once_with("daily_usage:u1_2026-10-15")

    @pytest.mark.asyncio()
    async def test_custom_prefix_used_in_key(self, client: AsyncMock) -> None:
        store = RedisSummaryStore(client, prefix="wl")
        await store.get("u1", "2026-10-15")
        client.get.assert_awaited_once_with("wl:u1_2026-10-15")

    @pytest.mark.asyncio()
    async def test_put_writes_camel_case_json(self, client: AsyncMock) -> None:
        store = RedisSummaryStore(client)
        await store.put("u1", "2026-10-15", _summary())

        key, payload = client.set.await_args.args
        assert key == "daily_usage:u1_2026-10-15"
        doc = json.loads(payload)
        assert doc["userId"] == "u1"
        assert doc["totalDailyUsage"] == 0.24
        assert doc["rooms"][0]["totalPowerUsed"] == 0.24
        assert doc["rooms"][0]["entries"][0]["powerUsed"] == 0.24
        assert "total_daily_usage" not in doc

    @pytest.mark.asyncio()
    async def test_get_parses_stored_document(self, client: AsyncMock) -> None:
        summary = _summary()
        client.get.return_value = summary.model_dump_json(by_alias=True).encode()
        store = RedisSummaryStore(client)

        loaded = await store.get("u1", "2026-10-15")

        assert loaded == summary

    @pytest.mark.asyncio()
    async def test_corrupt_document_raises_storage_error(self, client: AsyncMock) -> None:
        client.get.return_value = b'{"date": "2026-10-15"}'
        store = RedisSummaryStore(client)

        with pytest.raises(StorageError, match="Corrupt"):
            await store.get("u1", "2026-10-15")

    @pytest.mark.asyncio()
    async def test_read_error_raises_storage_error(self, client: AsyncMock) -> None:
        client.get.side_effect = RedisConnectionError("down")
        store = RedisSummaryStore(client)

        with pytest.raises(StorageError, match="read failed"):
            await store.get("u1", "2026-10-15")

    @pytest.mark.asyncio()
    async def test_write_error_raises_storage_error(self, client: AsyncMock) -> None:
        client.set.side_effect = RedisConnectionError("down")
        store = RedisSummaryStore(client)

        with pytest.raises(StorageError, match="write failed"):
            await store.put("u1", "2026-10-15", _summary())

    @pytest.mark.asyncio()
    async def test_delete_removes_key(self, client: AsyncMock) -> None:
        store = RedisSummaryStore(client)
        await store.delete("u1", "2026-10-15")
        client.delete.assert_awaited_once_with("daily_usage:u1_2026-10-15")

    @pytest.mark.asyncio()
    async def test_delete_error_raises_storage_error(self, client: AsyncMock) -> None:
        client.delete.side_effect = OSError("reset")
        store = RedisSummaryStore(client)

        with pytest.raises(StorageError):
            await store.delete("u1", "2026-10-15")

    @pytest.mark.asyncio()
    async def test_range_skips_failed_day(self, client: AsyncMock) -> None:
        """A Redis error on one day drops that day from the range."""
        payload = _summary().model_dump_json(by_alias=True)

        async def _get(key: str):
            if key.endswith("2026-10-14"):
                raise RedisConnectionError("down")
            if key.endswith("2026-10-15"):
                return payload
            return None

        client.get.side_effect = _get
        store = RedisSummaryStore(client)

        result = await store.get_range("u1", "2026-10-13", "2026-10-15")

        assert [s.date for s in result] == ["2026-10-15"]

    @pytest.mark.asyncio()
    async def test_ping_ok(self, client: AsyncMock) -> None:
        assert await RedisSummaryStore(client).ping() is True

    @pytest.mark.asyncio()
    async def test_ping_failure_returns_false(self, client: AsyncMock) -> None:
        client.ping.side_effect = RedisConnectionError("down")
        assert await RedisSummaryStore(client).ping() is False

    @pytest.mark.asyncio()
    async def test_aclose_closes_client(self, client: AsyncMock) -> None:
        await RedisSummaryStore(client).aclose()
        client.aclose.assert_awaited_once()
