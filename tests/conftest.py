"""
Shared test fixtures for wattlog tests.

Provides environment isolation, an in-memory store, a usage service with
a fixed clock, and failure-injecting store variants.

CHANGELOG:
- 2026-10-18: fail_ranges hooks read_window (STORY-013)
- 2026-10-13: Add FlakyStore for degraded-read tests (STORY-005)
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""

import asyncio
from datetime import UTC, date, datetime

import pytest

from wattlog.api import deps
from wattlog.errors import StorageError
from wattlog.models import DailyUsageSummary
from wattlog.services.usage import UsageService
from wattlog.store.memory import InMemorySummaryStore

# All Settings environment variable names, used for cleanup.
_ALL_ENV_VARS = (
    "USER_TOKENS",
    "STORE_BACKEND",
    "REDIS_URL",
    "DATABASE_URL",
    "REDIS_KEY_PREFIX",
    "TIMEZONE",
    "MAX_RANGE_DAYS",
    "TARIFF_PER_KWH",
    "CURRENCY",
    "LOG_LEVEL",
)

# Wednesday noon UTC; "today" is 2026-10-15 for every service fixture.
FIXED_NOW = datetime(2026, 10, 15, 12, 0, tzinfo=UTC)
TODAY = "2026-10-15"


class FlakyStore(InMemorySummaryStore):
    """In-memory store that fails on demand.

    Attributes:
        fail_days: Days whose ``get`` raises StorageError.
        cancel_days: Days whose ``get`` raises CancelledError.
        fail_writes: When True, ``put`` and ``delete`` raise StorageError.
        fail_ranges: When True, range reads raise StorageError.
    """

    def __init__(self) -> None:
        super().__init__()
        self.fail_days: set[str] = set()
        self.cancel_days: set[str] = set()
        self.fail_writes = False
        self.fail_ranges = False

    async def get(self, user_id: str, day: str) -> DailyUsageSummary | None:
        if day in self.fail_days:
            raise StorageError(f"injected read failure for {day}")
        if day in self.cancel_days:
            raise asyncio.CancelledError()
        return await super().get(user_id, day)

    async def put(self, user_id: str, day: str, summary: DailyUsageSummary) -> None:
        if self.fail_writes:
            raise StorageError("injected write failure")
        await super().put(user_id, day, summary)

    async def delete(self, user_id: str, day: str) -> None:
        if self.fail_writes:
            raise StorageError("injected delete failure")
        await super().delete(user_id, day)

    async def read_window(self, user_id: str, start: date, end: date) -> list[DailyUsageSummary]:
        if self.fail_ranges:
            raise StorageError("injected range failure")
        return await super().read_window(user_id, start, end)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Remove all wattlog env vars and isolate from .env files.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_api_singletons() -> None:
    """Drop cached API singletons so each test builds its own."""
    deps._usage_service = None
    deps._bearer_auth = None
    yield
    deps._usage_service = None
    deps._bearer_auth = None


@pytest.fixture()
def store() -> InMemorySummaryStore:
    """Empty in-memory daily summary store."""
    return InMemorySummaryStore()


@pytest.fixture()
def flaky_store() -> FlakyStore:
    """In-memory store with failure injection switched off."""
    return FlakyStore()


@pytest.fixture()
def service(store: InMemorySummaryStore) -> UsageService:
    """Usage service over the in-memory store, frozen at FIXED_NOW."""
    return UsageService(store, clock=lambda: FIXED_NOW)


@pytest.fixture()
def flaky_service(flaky_store: FlakyStore) -> UsageService:
    """Usage service over the failure-injecting store."""
    return UsageService(flaky_store, clock=lambda: FIXED_NOW)
