"""
Configuration from environment variables using Pydantic BaseSettings.

All configuration values are loaded from environment variables (or a
``.env`` file) at startup. No hardcoded URLs or credentials.

CHANGELOG:
- 2026-10-18: Raise MAX_RANGE_DAYS lower bound to 31 (STORY-013)
- 2026-10-14: Add TARIFF_PER_KWH and CURRENCY for cost figures (STORY-009)
- 2026-10-13: Add STORE_BACKEND selection and backend URL checks (STORY-006)
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

STORE_BACKENDS = ("memory", "redis", "postgres")

# Lower bound of MAX_RANGE_DAYS: one calendar month.
MIN_RANGE_DAYS = 31


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Attributes:
        USER_TOKENS: Comma-separated token:user_id pairs for the HTTP API.
        STORE_BACKEND: Daily summary store, one of memory, redis, postgres.
        REDIS_URL: Redis connection string (required for redis backend).
        DATABASE_URL: PostgreSQL connection string, asyncpg driver
            (required for postgres backend).
        REDIS_KEY_PREFIX: Namespace of daily usage documents in Redis.
        TIMEZONE: IANA zone that defines the user's calendar day.
        MAX_RANGE_DAYS: Longest caller-chosen date range (at least 31 days).
        TARIFF_PER_KWH: Flat tariff used for cost figures.
        CURRENCY: Currency label for formatted costs.
        LOG_LEVEL: Root log level name.
    """

    USER_TOKENS: str
    STORE_BACKEND: str = "redis"
    REDIS_URL: str | None = None
    DATABASE_URL: str | None = None
    REDIS_KEY_PREFIX: str = "daily_usage"
    TIMEZONE: str = "UTC"
    MAX_RANGE_DAYS: int = 92
    TARIFF_PER_KWH: float = 0.0
    CURRENCY: str = "Rs"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("STORE_BACKEND")
    @classmethod
    def store_backend_must_be_known(cls, v: str) -> str:
        """Validate the store backend name."""
        v = v.strip().lower()
        if v not in STORE_BACKENDS:
            raise ValueError(
                f"STORE_BACKEND must be one of: {', '.join(STORE_BACKENDS)}"
            )
        return v

    @field_validator("TIMEZONE")
    @classmethod
    def timezone_must_exist(cls, v: str) -> str:
        """Validate that TIMEZONE names a known IANA zone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown TIMEZONE: {v!r}") from exc
        return v

    @field_validator("MAX_RANGE_DAYS")
    @classmethod
    def max_range_days_must_be_valid(cls, v: int) -> int:
        """Validate range cap is between MIN_RANGE_DAYS and 366 days."""
        if v < MIN_RANGE_DAYS or v > 366:
            raise ValueError(f"MAX_RANGE_DAYS must be >= {MIN_RANGE_DAYS} and <= 366")
        return v

    @field_validator("TARIFF_PER_KWH")
    @classmethod
    def tariff_must_not_be_negative(cls, v: float) -> float:
        """Validate the tariff is zero or positive."""
        if v < 0:
            raise ValueError("TARIFF_PER_KWH must be >= 0")
        return v

    @model_validator(mode="after")
    def _backend_url_present(self) -> "Settings":
        """Require the connection URL of the selected backend."""
        if self.STORE_BACKEND == "redis" and not self.REDIS_URL:
            raise ValueError("REDIS_URL is required when STORE_BACKEND=redis")
        if self.STORE_BACKEND == "postgres" and not self.DATABASE_URL:
            raise ValueError("DATABASE_URL is required when STORE_BACKEND=postgres")
        return self

    @property
    def tzinfo(self) -> ZoneInfo:
        """The configured timezone as a ZoneInfo object."""
        return ZoneInfo(self.TIMEZONE)


def get_settings() -> Settings:
    """Create and return a Settings instance.

    Returns:
        Settings: Validated configuration from environment variables.
    """
    return Settings()
