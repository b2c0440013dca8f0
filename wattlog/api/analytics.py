"""
Analytics API endpoints for dashboards and charts.

Stats, trend series, category breakdown and the energy profile of the
authenticated user. These reads degrade instead of failing: a day the
store could not return counts as zero.

CHANGELOG:
- 2026-10-16: Initial creation (STORY-012)

TODO:
- None
"""

import logging

from fastapi import APIRouter, HTTPException, Query

from wattlog.api.deps import CurrentUserId, UsageServiceDep
from wattlog.errors import ValidationError
from wattlog.models import EnergyProfile, UsageStats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["analytics"])

TREND_FRAMES = ("weekly", "monthly", "yearly")


@router.get("/stats", response_model=UsageStats)
async def get_usage_stats(
    user_id: CurrentUserId,
    service: UsageServiceDep,
) -> UsageStats:
    """Today, yesterday, weekly average, monthly estimate and trend."""
    return await service.get_usage_stats(user_id)


@router.get("/trends/{frame}")
async def get_trend(
    frame: str,
    user_id: CurrentUserId,
    service: UsageServiceDep,
) -> dict:
    """Chart series for a frame.

    - weekly: 7 daily totals, today last.
    - monthly: 4 weekly totals over the trailing 28 days.
    - yearly: 6 calendar month totals, current month last.

    Raises:
        HTTPException: 400 if frame is not a valid option.
    """
    if frame == "weekly":
        series = await service.get_weekly_trend(user_id)
    elif frame == "monthly":
        series = await service.get_monthly_trend(user_id)
    elif frame == "yearly":
        series = await service.get_yearly_trend(user_id)
    else:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid frame: {frame}. Must be one of: {', '.join(TREND_FRAMES)}",
        )
    return {"frame": frame, "series": series}


@router.get("/breakdown")
async def get_category_breakdown(
    user_id: CurrentUserId,
    service: UsageServiceDep,
    days: int = Query(7, ge=0, description="Window length in days before today"),
) -> dict[str, int]:
    """Percentage of energy per device category.

    Raises:
        HTTPException: 400 if the window is longer than the store allows.
    """
    try:
        return await service.get_category_breakdown(user_id, days)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/profile", response_model=EnergyProfile)
async def get_energy_profile(
    user_id: CurrentUserId,
    service: UsageServiceDep,
) -> EnergyProfile:
    """Energy roll-up for dashboards.

    Raises:
        HTTPException: 404 when the user has no usage data yet.
    """
    profile = await service.get_energy_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="No usage data yet")
    return profile
