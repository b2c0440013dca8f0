"""
FastAPI application entry point for the wattlog API.

Wires the usage, analytics and health routers and manages the usage
service lifecycle.

CHANGELOG:
- 2026-10-16: Initial creation (STORY-012)

TODO:
- None
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from wattlog.api.analytics import router as analytics_router
from wattlog.api.deps import close_usage_service, init_bearer_auth, init_usage_service
from wattlog.api.health import router as health_router
from wattlog.api.usage import router as usage_router
from wattlog.config import get_settings
from wattlog.db.session import init_schema
from wattlog.logging_config import setup_logging
from wattlog.store import SqlSummaryStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: configure logging, auth and the store."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    init_bearer_auth()
    service = init_usage_service(settings)
    if isinstance(service.store, SqlSummaryStore) and service.store.engine is not None:
        await init_schema(service.store.engine)
    logger.info("wattlog started with %s store", settings.STORE_BACKEND)
    yield
    await close_usage_service()


app = FastAPI(
    title="wattlog API",
    description="Daily electricity usage logging and analytics.",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(usage_router)
app.include_router(analytics_router)
app.include_router(health_router)


@app.get("/")
async def root() -> dict:
    """Liveness endpoint.

    Returns:
        dict: JSON object with application status.
    """
    return {"status": "ok"}
