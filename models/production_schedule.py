"""
Production schedule schemas.

Covers schedule entries as stored, create/update payloads,
and the derived month calendar view.
"""

from pydantic import Field
from typing import Optional
from decimal import Decimal
from datetime import datetime
from enum import Enum
import datetime as dt

from models.base import BaseSchema, camel_field
from models.inventory import ProductSummary


class ScheduleStatus(str, Enum):
    """Lifecycle of a production run."""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SchedulePriority(str, Enum):
    """Production run priority."""
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


class StatusIndicator(str, Enum):
    """Calendar dot class for an entry status."""
    DONE = "done"
    ACTIVE = "active"
    PENDING = "pending"
    CANCELLED = "cancelled"
    NEUTRAL = "neutral"


# ===================
# ENTRIES
# ===================

class ScheduleEntry(BaseSchema):
    """
    A scheduled production run.

    status and priority stay plain strings so rows with values outside
    the known enums still load; the calendar maps unknown statuses to
    a neutral indicator. id and product_id may be absent on entries
    posted for an ad-hoc calendar render.
    """

    id: Optional[str] = None
    product_id: Optional[str] = camel_field("product_id", None)
    scheduled_date: datetime = camel_field("scheduled_date")
    status: str = ScheduleStatus.SCHEDULED.value
    production_line: str = camel_field("production_line", "")
    planned_quantity: int = camel_field("planned_quantity", 0)
    actual_quantity: int = camel_field("actual_quantity", 0)
    priority: str = SchedulePriority.NORMAL.value
    efficiency: Optional[Decimal] = None
    notes: Optional[str] = None
    product: Optional[ProductSummary] = None


class ScheduleEntryCreate(BaseSchema):
    """
    Create a production schedule entry.

    Required: product_id, scheduled_date, planned_quantity, production_line
    """

    product_id: str = camel_field("product_id", min_length=1)
    scheduled_date: datetime = camel_field("scheduled_date")
    planned_quantity: int = camel_field("planned_quantity", gt=0)
    production_line: str = camel_field("production_line", min_length=1, max_length=100)
    actual_quantity: int = camel_field("actual_quantity", 0, ge=0)
    status: ScheduleStatus = ScheduleStatus.SCHEDULED
    priority: SchedulePriority = SchedulePriority.NORMAL
    efficiency: Optional[Decimal] = Field(None, ge=0, le=100)
    notes: Optional[str] = None


class ScheduleEntryUpdate(BaseSchema):
    """
    Update a production schedule entry.

    All fields optional - only provided fields are updated.
    """

    scheduled_date: Optional[datetime] = camel_field("scheduled_date", None)
    planned_quantity: Optional[int] = camel_field("planned_quantity", None, gt=0)
    actual_quantity: Optional[int] = camel_field("actual_quantity", None, ge=0)
    production_line: Optional[str] = camel_field("production_line", None, min_length=1, max_length=100)
    status: Optional[ScheduleStatus] = None
    priority: Optional[SchedulePriority] = None
    efficiency: Optional[Decimal] = Field(None, ge=0, le=100)
    notes: Optional[str] = None


# ===================
# CALENDAR
# ===================

class MonthRef(BaseSchema):
    """A (year, month) pair."""
    year: int
    month: int = Field(..., ge=1, le=12)


class CalendarDay(BaseSchema):
    """One day cell of the calendar grid."""

    date: dt.date
    entries: list[ScheduleEntry] = Field(..., description="Every entry on this day, in input order")
    status_dots: list[StatusIndicator] = Field(..., description="Indicators for the first two entries")
    overflow_count: int = Field(..., description="Entries beyond the two shown as dots")


class CalendarMonth(BaseSchema):
    """Month grid view of the production schedule."""

    year: int
    month: int
    month_name: str
    days_in_month: int
    first_weekday: int = Field(..., description="0=Sunday .. 6=Saturday")
    leading_blanks: int
    days: list[CalendarDay]
    previous: MonthRef
    next: MonthRef
    skipped_entries: int = Field(0, description="Entries dropped for an unreadable date")


class CalendarRequest(BaseSchema):
    """Entries posted for an ad-hoc calendar render."""

    entries: list[dict]
