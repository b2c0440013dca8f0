"""
Usage entry API endpoints.

Log and delete device usage windows and read daily usage documents for
the authenticated user. Input problems map to 400; store failures on
writes map to 503 so the client can tell the user the entry was not
saved.

CHANGELOG:
- 2026-10-16: Initial creation (STORY-012)

TODO:
- None
"""

import logging

from fastapi import APIRouter, HTTPException, Query, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from wattlog.api.deps import CurrentUserId, UsageServiceDep
from wattlog.errors import StorageError, ValidationError
from wattlog.models import DailyUsageSummary, DeviceInfo, UsageEntry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/usage", tags=["usage"])


# ---------------------------------------------------------------------------
# Pydantic request / response schemas
# ---------------------------------------------------------------------------


class EntryCreate(BaseModel):
    """Schema for logging one device usage window.

    Attributes:
        room_id: Room the device was used in.
        room_name: Room name snapshot.
        device: Device snapshot (id, name, wattage).
        start_time: Start, ``HH:MM``.
        end_time: End, ``HH:MM``.
        date: Calendar day ``YYYY-MM-DD``; defaults to today.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    room_id: str
    room_name: str
    device: DeviceInfo
    start_time: str
    end_time: str
    date: str | None = None


class UsageRangeResponse(BaseModel):
    """Schema for a range of daily usage documents."""

    start: str
    end: str
    summaries: list[DailyUsageSummary]


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/entries", response_model=UsageEntry, status_code=201)
async def add_usage_entry(
    request: EntryCreate,
    user_id: CurrentUserId,
    service: UsageServiceDep,
) -> UsageEntry:
    """Log a device usage window for the authenticated user.

    Raises:
        HTTPException: 400 on invalid input, 503 if the entry could not
            be saved.
    """
    try:
        return await service.add_entry(
            user_id,
            request.room_id,
            request.room_name,
            request.device,
            request.start_time,
            request.end_time,
            request.date,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StorageError as exc:
        logger.error("Could not save entry for user %s: %s", user_id, exc)
        raise HTTPException(
            status_code=503, detail="Could not save entry. Please retry.",
        ) from exc


@router.delete("/{day}/rooms/{room_id}/entries/{entry_id}", status_code=204)
async def delete_usage_entry(
    day: str,
    room_id: str,
    entry_id: str,
    user_id: CurrentUserId,
    service: UsageServiceDep,
) -> Response:
    """Delete one entry. Deleting an entry that is already gone succeeds.

    Raises:
        HTTPException: 400 on a malformed day, 503 if the store failed.
    """
    try:
        await service.delete_entry(user_id, day, room_id, entry_id)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StorageError as exc:
        logger.error("Could not delete entry %s for user %s: %s", entry_id, user_id, exc)
        raise HTTPException(
            status_code=503, detail="Could not delete entry. Please retry.",
        ) from exc
    return Response(status_code=204)


@router.get("", response_model=UsageRangeResponse)
async def get_usage_range(
    user_id: CurrentUserId,
    service: UsageServiceDep,
    start: str = Query(..., description="First day, YYYY-MM-DD"),
    end: str = Query(..., description="Last day (inclusive), YYYY-MM-DD"),
) -> UsageRangeResponse:
    """Daily usage documents present between start and end inclusive.

    Raises:
        HTTPException: 400 on malformed dates or an over-long range.
    """
    try:
        summaries = await service.get_usage_range(user_id, start, end)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return UsageRangeResponse(start=start, end=end, summaries=summaries)


@router.get("/{day}", response_model=DailyUsageSummary)
async def get_daily_usage(
    day: str,
    user_id: CurrentUserId,
    service: UsageServiceDep,
) -> DailyUsageSummary:
    """Daily usage document for one day.

    Raises:
        HTTPException: 400 on a malformed day, 404 when nothing was
            logged that day, 503 if the store failed.
    """
    try:
        summary = await service.get_daily_usage(user_id, day)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    if summary is None:
        raise HTTPException(
            status_code=404, detail=f"No usage logged on {day}",
        )
    return summary
