"""
FastAPI dependency injection providers.

Provides the process-wide usage service and the authenticated user id
for use with FastAPI's Depends() mechanism.

CHANGELOG:
- 2026-10-16: Initial creation (STORY-012)

TODO:
- None
"""

from typing import Annotated

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from wattlog.auth.bearer import BearerAuth, parse_user_tokens
from wattlog.config import Settings, get_settings
from wattlog.services.usage import UsageService
from wattlog.store import build_store

# ---------------------------------------------------------------------------
# Usage service
# ---------------------------------------------------------------------------

_usage_service: UsageService | None = None


def init_usage_service(settings: Settings | None = None) -> UsageService:
    """Build the usage service and its store from settings.

    Called at startup by the lifespan and lazily on first request as a
    safety net. Cached after the first call.

    Returns:
        UsageService: The process-wide usage service.
    """
    global _usage_service  # noqa: PLW0603
    if _usage_service is None:
        settings = settings or get_settings()
        _usage_service = UsageService(
            build_store(settings),
            tz=settings.tzinfo,
            tariff_per_kwh=settings.TARIFF_PER_KWH,
            currency=settings.CURRENCY,
        )
    return _usage_service


async def close_usage_service() -> None:
    """Release store connections and drop the cached service."""
    global _usage_service  # noqa: PLW0603
    if _usage_service is not None:
        await _usage_service.store.aclose()
        _usage_service = None


def get_usage_service() -> UsageService:
    """FastAPI dependency: the process-wide usage service."""
    return init_usage_service()


UsageServiceDep = Annotated[UsageService, Depends(get_usage_service)]


# ---------------------------------------------------------------------------
# Authentication dependency
# ---------------------------------------------------------------------------

_bearer_auth: BearerAuth | None = None

# auto_error=False lets us return 401 ourselves instead of FastAPI's 403.
_bearer_scheme = HTTPBearer(auto_error=False)


def init_bearer_auth() -> BearerAuth:
    """Build BearerAuth from USER_TOKENS. Cached after first call."""
    global _bearer_auth  # noqa: PLW0603
    if _bearer_auth is None:
        settings = get_settings()
        _bearer_auth = BearerAuth(parse_user_tokens(settings.USER_TOKENS))
    return _bearer_auth


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer_scheme),
) -> str:
    """FastAPI dependency: validates Bearer token -> returns user_id.

    Raises:
        HTTPException: 401 if credentials are missing or token invalid.
    """
    return await init_bearer_auth().verify(credentials)


# Annotated dependency for use in FastAPI route signatures:
#   async def my_endpoint(user_id: CurrentUserId): ...
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
