"""
Production schedule calendar - month grid aggregation.

Groups schedule entries by the calendar day they fall on (in the display
timezone) and condenses each day to at most two status dots plus an
overflow count. The full entry list for each day is kept alongside the dots.

All functions here are pure; they never mutate the entries passed in.
"""

from collections import defaultdict
from collections.abc import Mapping
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Iterable, Optional
from zoneinfo import ZoneInfo

from pydantic import ValidationError as PydanticValidationError

from models.production_schedule import (
    ScheduleEntry,
    ScheduleStatus,
    StatusIndicator,
    CalendarDay,
    CalendarMonth,
    MonthRef,
)
from exceptions import InvalidMonthError, InvalidInputShapeError


MAX_STATUS_DOTS = 2

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

STATUS_INDICATORS = {
    ScheduleStatus.COMPLETED.value: StatusIndicator.DONE,
    ScheduleStatus.IN_PROGRESS.value: StatusIndicator.ACTIVE,
    ScheduleStatus.SCHEDULED.value: StatusIndicator.PENDING,
    ScheduleStatus.CANCELLED.value: StatusIndicator.CANCELLED,
}


# ===================
# MONTH ARITHMETIC
# ===================

def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise InvalidMonthError(month)


def next_month(year: int, month: int) -> tuple[int, int]:
    """(2024, 12) → (2025, 1)"""
    _check_month(month)
    if month == 12:
        return year + 1, 1
    return year, month + 1


def prev_month(year: int, month: int) -> tuple[int, int]:
    """(2024, 1) → (2023, 12)"""
    _check_month(month)
    if month == 1:
        return year - 1, 12
    return year, month - 1


def days_in_month(year: int, month: int) -> int:
    """
    Number of days in a month.

    Day zero of the next month: the first of the following month minus
    one day is the last day of this one, so leap years come for free.
    December is always 31 and never needs the following year.
    """
    _check_month(month)
    if month == 12:
        return 31
    return (date(year, month + 1, 1) - timedelta(days=1)).day


def first_weekday_of_month(year: int, month: int) -> int:
    """Weekday of the 1st, 0=Sunday .. 6=Saturday."""
    _check_month(month)
    # date.weekday() is 0=Monday
    return (date(year, month, 1).weekday() + 1) % 7


def month_name(month: int) -> str:
    _check_month(month)
    return MONTH_NAMES[month - 1]


# ===================
# ENTRY DATES
# ===================

def _entry_value(entry: Any, *keys: str) -> Any:
    """Read a field from a ScheduleEntry or a raw row (snake or camel case)."""
    for key in keys:
        if isinstance(entry, Mapping):
            value = entry.get(key)
        else:
            value = getattr(entry, key, None)
        if value is not None:
            return value
    return None


def parse_scheduled_date(value: Any) -> Optional[datetime]:
    """
    Parse a scheduled date.

    Accepts datetime, date (midnight) and ISO-8601 strings, including a
    trailing "Z". Anything else returns None.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def local_date(entry: Any, tz: Optional[tzinfo] = None) -> Optional[date]:
    """
    Calendar day an entry falls on in the display timezone.

    Naive timestamps are taken as already local. Returns None when the
    scheduled date is missing or unreadable.
    """
    scheduled = parse_scheduled_date(
        _entry_value(entry, "scheduled_date", "scheduledDate")
    )
    if scheduled is None:
        return None
    if tz is not None and scheduled.tzinfo is not None:
        scheduled = scheduled.astimezone(tz)
    return scheduled.date()


def entries_for_date(
    entries: Iterable[Any],
    day: date,
    tz: Optional[tzinfo] = None,
) -> list[Any]:
    """
    Entries scheduled on a given calendar day, in input order.

    Matching is by date only: 00:00:01 and 23:59 on the same day both match.
    Entries with an unreadable date never match.
    """
    return [entry for entry in entries if local_date(entry, tz) == day]


# ===================
# DAY SUMMARY
# ===================

def status_indicator(status: Any) -> StatusIndicator:
    """Map an entry status to its dot class; unknown statuses are neutral."""
    if isinstance(status, ScheduleStatus):
        status = status.value
    return STATUS_INDICATORS.get(status, StatusIndicator.NEUTRAL)


def summarize_day(day: date, day_entries: list[Any]) -> CalendarDay:
    """
    Condense one day's entries for the grid.

    The first two entries become status dots; the rest are counted as
    overflow. entries keeps the complete list for the day panel.
    Raw rows are accepted; rows that do not validate are left out.
    """
    valid, _ = coerce_entries(day_entries)
    shown = valid[:MAX_STATUS_DOTS]
    return CalendarDay(
        date=day,
        entries=valid,
        status_dots=[status_indicator(entry.status) for entry in shown],
        overflow_count=max(len(valid) - MAX_STATUS_DOTS, 0),
    )


# ===================
# MONTH VIEW
# ===================

def coerce_entries(entries: Iterable[Any]) -> tuple[list[ScheduleEntry], list[Any]]:
    """
    Validate raw rows into ScheduleEntry objects.

    Returns:
        (valid entries in input order, rejected rows)
    """
    if isinstance(entries, (str, bytes, Mapping)):
        raise InvalidInputShapeError(
            f"entries must be a list, got {type(entries).__name__}"
        )

    valid = []
    rejected = []
    for entry in entries:
        if isinstance(entry, ScheduleEntry):
            valid.append(entry)
            continue
        if not isinstance(entry, Mapping):
            raise InvalidInputShapeError(
                f"Schedule entry must be a mapping, got {type(entry).__name__}"
            )
        if parse_scheduled_date(_entry_value(entry, "scheduled_date", "scheduledDate")) is None:
            rejected.append(entry)
            continue
        try:
            valid.append(ScheduleEntry.model_validate(entry))
        except PydanticValidationError:
            rejected.append(entry)
    return valid, rejected


def build_month(
    entries: Iterable[Any],
    year: int,
    month: int,
    tz: Optional[tzinfo] = None,
) -> CalendarMonth:
    """
    Build the month grid for a list of schedule entries.

    Entries outside the month are ignored; entries with an unreadable
    date are dropped and counted in skipped_entries.

    Args:
        entries: ScheduleEntry objects or raw rows
        year: Displayed year
        month: Displayed month (1-12)
        tz: Display timezone (None = use timestamps as given)

    Returns:
        CalendarMonth with one CalendarDay per day of the month
    """
    _check_month(month)
    valid, rejected = coerce_entries(entries)

    by_day: dict[date, list[ScheduleEntry]] = defaultdict(list)
    for entry in valid:
        by_day[local_date(entry, tz)].append(entry)

    total_days = days_in_month(year, month)
    first_weekday = first_weekday_of_month(year, month)
    days = []
    for day_number in range(1, total_days + 1):
        day = date(year, month, day_number)
        days.append(summarize_day(day, by_day.get(day, [])))

    previous_year, previous_month = prev_month(year, month)
    following_year, following_month = next_month(year, month)

    return CalendarMonth(
        year=year,
        month=month,
        month_name=month_name(month),
        days_in_month=total_days,
        first_weekday=first_weekday,
        leading_blanks=first_weekday,
        days=days,
        previous=MonthRef(year=previous_year, month=previous_month),
        next=MonthRef(year=following_year, month=following_month),
        skipped_entries=len(rejected),
    )


def get_display_timezone(name: str) -> tzinfo:
    """Resolve an IANA timezone name."""
    return ZoneInfo(name)
