"""
Production schedule service.

CRUD for scheduled production runs and the month calendar built on top.
"""

from typing import Any, Iterable, Optional
from datetime import date, datetime, time, timedelta
import structlog

from config import get_supabase_client, settings
from models.production_schedule import (
    ScheduleEntry,
    ScheduleEntryCreate,
    ScheduleEntryUpdate,
    CalendarMonth,
)
from services import calendar_service
from exceptions import (
    ScheduleEntryNotFoundError,
    DatabaseError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

SELECT_WITH_PRODUCT = "*, product:products(*)"


def _padded_range(first: date, last: date) -> tuple[datetime, datetime]:
    """Query bounds one day either side of [first, last], clamped to the date range."""
    start = first - timedelta(days=1) if first > date.min else first
    end = last + timedelta(days=1) if last < date.max else last
    return datetime.combine(start, time.min), datetime.combine(end, time.max)


class ProductionScheduleService:
    """
    Production schedule business logic.

    Handles reads and writes for the production_schedule table and
    renders month calendars from it.
    """

    def __init__(self):
        self.table = "production_schedule"
        self.timezone = calendar_service.get_display_timezone(settings.display_timezone)

    @property
    def db(self):
        # Resolved per call so calendar rendering works without a database
        return get_supabase_client()

    # ===================
    # READ OPERATIONS
    # ===================

    def get_rows(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[dict]:
        """
        Raw schedule rows ordered by scheduled date, product embedded.

        The range only applies when both bounds are given (inclusive).
        Rows are not validated; the calendar views skip unreadable ones.
        """
        logger.info(
            "getting_production_schedule",
            start_date=start_date,
            end_date=end_date
        )

        try:
            query = self.db.table(self.table).select(SELECT_WITH_PRODUCT)

            if start_date and end_date:
                query = (
                    query
                    .gte("scheduled_date", start_date.isoformat())
                    .lte("scheduled_date", end_date.isoformat())
                )

            result = query.order("scheduled_date").execute()

        except Exception as e:
            logger.error("get_production_schedule_failed", error=str(e))
            raise DatabaseError("select", str(e))

        rows = result.data or []
        logger.info("production_schedule_retrieved", count=len(rows))
        return rows

    def get_all(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[ScheduleEntry]:
        """
        Get schedule entries ordered by scheduled date.

        Args:
            start_date: Range start
            end_date: Range end

        Returns:
            List of ScheduleEntry with product embedded
        """
        return [ScheduleEntry(**row) for row in self.get_rows(start_date, end_date)]

    def get_by_id(self, entry_id: str) -> ScheduleEntry:
        """
        Get a single schedule entry.

        Raises:
            ScheduleEntryNotFoundError: If entry doesn't exist
        """
        logger.debug("getting_schedule_entry", entry_id=entry_id)

        try:
            result = (
                self.db.table(self.table)
                .select(SELECT_WITH_PRODUCT)
                .eq("id", entry_id)
                .execute()
            )

            if not result.data:
                raise ScheduleEntryNotFoundError(entry_id)

            return ScheduleEntry(**result.data[0])

        except ScheduleEntryNotFoundError:
            raise
        except Exception as e:
            logger.error("get_schedule_entry_failed", entry_id=entry_id, error=str(e))
            raise DatabaseError("select", str(e))

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, data: ScheduleEntryCreate) -> ScheduleEntry:
        """
        Create a schedule entry.

        Args:
            data: Entry to create (status defaults to scheduled, priority to normal)

        Returns:
            Created ScheduleEntry
        """
        logger.info(
            "creating_schedule_entry",
            product_id=data.product_id,
            scheduled_date=data.scheduled_date,
            production_line=data.production_line
        )

        try:
            payload = data.model_dump(mode="json", exclude_none=True)
            result = self.db.table(self.table).insert(payload).execute()

            entry = ScheduleEntry(**result.data[0])

            logger.info("schedule_entry_created", entry_id=entry.id)

            return entry

        except Exception as e:
            logger.error("create_schedule_entry_failed", error=str(e))
            raise DatabaseError("insert", str(e))

    def update(self, entry_id: str, data: ScheduleEntryUpdate) -> ScheduleEntry:
        """
        Update a schedule entry.

        Only provided fields are changed.

        Raises:
            ScheduleEntryNotFoundError: If entry doesn't exist
            ValidationError: If no fields provided
        """
        logger.info("updating_schedule_entry", entry_id=entry_id)

        update_data = data.model_dump(mode="json", exclude_none=True)
        if not update_data:
            raise ValidationError("No fields to update")

        try:
            result = (
                self.db.table(self.table)
                .update(update_data)
                .eq("id", entry_id)
                .execute()
            )

            if not result.data:
                raise ScheduleEntryNotFoundError(entry_id)

            logger.info(
                "schedule_entry_updated",
                entry_id=entry_id,
                fields=list(update_data.keys())
            )

            return ScheduleEntry(**result.data[0])

        except ScheduleEntryNotFoundError:
            raise
        except Exception as e:
            logger.error("update_schedule_entry_failed", entry_id=entry_id, error=str(e))
            raise DatabaseError("update", str(e))

    # ===================
    # CALENDAR
    # ===================

    def render_calendar(
        self,
        entries: Iterable[Any],
        year: int,
        month: int,
    ) -> CalendarMonth:
        """
        Build the month grid for caller-supplied entries.

        Entries with an unreadable date are logged and left out.
        """
        calendar = calendar_service.build_month(entries, year, month, tz=self.timezone)

        if calendar.skipped_entries:
            logger.warning(
                "schedule_entries_skipped",
                year=year,
                month=month,
                skipped=calendar.skipped_entries,
                reason="invalid_scheduled_date"
            )

        logger.info(
            "calendar_built",
            year=year,
            month=month,
            days_with_entries=sum(1 for day in calendar.days if day.entries)
        )

        return calendar

    def get_calendar(self, year: int, month: int) -> CalendarMonth:
        """
        Month grid from the stored schedule.

        The query range is padded by a day on each side so entries stored in
        UTC near midnight still land on the right local day.
        """
        total_days = calendar_service.days_in_month(year, month)
        first = date(year, month, 1)
        last = date(year, month, total_days)

        start, end = _padded_range(first, last)
        rows = self.get_rows(start_date=start, end_date=end)
        return self.render_calendar(rows, year, month)

    def get_day(self, day: date) -> list[ScheduleEntry]:
        """
        Every entry scheduled on a day (for the side panel).

        Rows with an unreadable date are logged and left out.
        """
        start, end = _padded_range(day, day)
        entries, rejected = calendar_service.coerce_entries(
            self.get_rows(start_date=start, end_date=end)
        )
        if rejected:
            logger.warning(
                "schedule_entries_skipped",
                day=day,
                skipped=len(rejected),
                reason="invalid_scheduled_date"
            )

        return calendar_service.entries_for_date(entries, day, tz=self.timezone)


# Singleton instance for convenience
_production_schedule_service: Optional[ProductionScheduleService] = None


def get_production_schedule_service() -> ProductionScheduleService:
    """Get or create ProductionScheduleService instance."""
    global _production_schedule_service
    if _production_schedule_service is None:
        _production_schedule_service = ProductionScheduleService()
    return _production_schedule_service
