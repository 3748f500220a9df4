"""
Production Schedule API routes.

Scheduled production runs and the month calendar view.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Optional
from datetime import date, datetime
import structlog

from models.production_schedule import (
    ScheduleEntry,
    ScheduleEntryCreate,
    ScheduleEntryUpdate,
    CalendarMonth,
    CalendarRequest,
)
from services.production_schedule_service import get_production_schedule_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


def _current_month() -> tuple[int, int]:
    today = date.today()
    return today.year, today.month


# ===================
# CALENDAR
# ===================

@router.get("/calendar", response_model=CalendarMonth)
async def get_calendar(
    year: Optional[int] = Query(None, ge=1970, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
):
    """
    Month grid of the stored production schedule.

    Defaults to the current month. Each day carries up to two status dots,
    an overflow count, and its full entry list.
    """
    try:
        default_year, default_month = _current_month()
        service = get_production_schedule_service()
        return service.get_calendar(year or default_year, month or default_month)

    except Exception as e:
        return handle_error(e)


@router.post("/calendar", response_model=CalendarMonth)
async def render_calendar(
    request: CalendarRequest,
    year: Optional[int] = Query(None, ge=1970, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
):
    """
    Month grid for posted schedule entries.

    Entries with an unreadable scheduled date are left out and counted
    in skipped_entries.
    """
    try:
        default_year, default_month = _current_month()
        service = get_production_schedule_service()
        return service.render_calendar(
            request.entries,
            year or default_year,
            month or default_month,
        )

    except Exception as e:
        return handle_error(e)


@router.get("/day", response_model=list[ScheduleEntry])
async def get_day(day: date = Query(..., description="Calendar day (YYYY-MM-DD)")):
    """
    Every entry scheduled on one day, for the day detail panel.
    """
    try:
        service = get_production_schedule_service()
        return service.get_day(day)

    except Exception as e:
        return handle_error(e)


# ===================
# ENTRIES
# ===================

@router.get("", response_model=list[ScheduleEntry])
async def list_schedule(
    start_date: Optional[datetime] = Query(None, description="Range start (needs end_date)"),
    end_date: Optional[datetime] = Query(None, description="Range end (needs start_date)"),
):
    """
    Get the production schedule ordered by date.

    Filters to the range only when both start_date and end_date are given.
    """
    try:
        service = get_production_schedule_service()
        return service.get_all(start_date=start_date, end_date=end_date)

    except Exception as e:
        return handle_error(e)


@router.post("", response_model=ScheduleEntry, status_code=201)
async def create_schedule_entry(data: ScheduleEntryCreate):
    """
    Schedule a production run.

    Raises:
        422: Validation error
    """
    try:
        service = get_production_schedule_service()
        return service.create(data)

    except Exception as e:
        return handle_error(e)


@router.patch("/{entry_id}", response_model=ScheduleEntry)
async def update_schedule_entry(entry_id: str, data: ScheduleEntryUpdate):
    """
    Update a production run (status, quantities, date...).

    Raises:
        404: Entry not found
        422: Validation error
    """
    try:
        service = get_production_schedule_service()
        return service.update(entry_id, data)

    except Exception as e:
        return handle_error(e)
