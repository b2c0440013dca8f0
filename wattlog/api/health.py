"""
Health check endpoint that probes the daily summary store.

Returns HTTP 200 when the store answers its probe, or HTTP 503 when it
does not.

CHANGELOG:
- 2026-10-16: Initial creation (STORY-012)

TODO:
- None
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from wattlog.api.deps import get_usage_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


async def _check_store() -> str:
    """Probe the configured store.

    Returns:
        "ok" if the probe succeeds, "error" otherwise.
    """
    try:
        service = get_usage_service()
        return "ok" if await service.store.ping() else "error"
    except Exception:
        logger.warning("Health check: store probe failed", exc_info=True)
        return "error"


@router.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint probing the store.

    Returns:
        JSONResponse: JSON with status and store fields.
            HTTP 200 when the store is ok, HTTP 503 when degraded.
    """
    store_status = await _check_store()
    ok = store_status == "ok"

    return JSONResponse(
        status_code=200 if ok else 503,
        content={
            "status": "ok" if ok else "degraded",
            "store": store_status,
        },
    )
