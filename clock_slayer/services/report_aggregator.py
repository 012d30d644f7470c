"""Report aggregator - joins time and mileage records into report rows."""
import asyncio
import logging
from collections import defaultdict
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo

from pymongo.errors import PyMongoError

from clock_slayer.config import settings
from clock_slayer.errors import StoreUnavailable
from clock_slayer.models.mileage_entry import MileageEntry
from clock_slayer.models.project import Project
from clock_slayer.models.report import UNKNOWN_PROJECT, ReportRow, ReportSummary
from clock_slayer.models.time_entry import TimeEntry
from clock_slayer.services.mileage_service import MileageService
from clock_slayer.services.project_service import ProjectService
from clock_slayer.services.time_entry_service import TimeEntryService
from clock_slayer.utils.dates import as_utc
from clock_slayer.utils.numbers import round_2

logger = logging.getLogger(__name__)

CLOCK_FORMAT = "%I:%M %p"  # 08:00 AM


class ReportAggregator:
    """
    Builds report rows and summary totals for a report window.

    Each time entry becomes one row. Mileage is summed per
    (project_id, calendar date) and the sum is attached to every time row
    with that key, so two time entries on the same project and day both carry
    the full mileage and the summary counts it twice. Report consumers rely
    on this, so it is kept as is.
    """

    def __init__(
        self,
        db,
        timezone: Optional[tzinfo] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize aggregator.

        Args:
            db: Database connection
            timezone: Zone used for calendar dates and clock times
                (defaults to the configured report time zone)
            timeout: Seconds allowed for the store queries
        """
        self.timezone = timezone or ZoneInfo(settings.report_timezone)
        self.time_entry_service = TimeEntryService(db, timezone=self.timezone)
        self.mileage_service = MileageService(db)
        self.project_service = ProjectService(db)
        self.timeout = settings.store_timeout_seconds if timeout is None else timeout

    def _local(self, value: datetime) -> datetime:
        return as_utc(value).astimezone(self.timezone)

    async def _fetch(
        self,
        window_start: datetime,
        window_end: Optional[datetime],
    ) -> tuple[list[TimeEntry], list[MileageEntry], list[Project]]:
        time_entries = await self.time_entry_service.list_entries(
            start_gte=window_start,
            start_lte=window_end,
            newest_first=False,
        )
        mileage_entries = await self.mileage_service.list_entries(
            date_gte=self._local(window_start).date(),
            date_lte=self._local(window_end).date() if window_end else None,
            newest_first=False,
        )
        projects = await self.project_service.list_projects()
        return time_entries, mileage_entries, projects

    async def generate_report(
        self,
        window_start: datetime,
        window_end: Optional[datetime] = None,
    ) -> tuple[list[ReportRow], ReportSummary]:
        """
        Generate report rows and totals.

        Args:
            window_start: Lower bound on time entry start and mileage date
            window_end: Optional upper bound; None applies the lower bound only

        Returns:
            Tuple of (rows ordered by start time, summary)

        Raises:
            StoreUnavailable: If any store query fails or times out
        """
        if window_end is not None and window_end < window_start:
            raise ValueError("window_end must not be before window_start")

        try:
            time_entries, mileage_entries, projects = await asyncio.wait_for(
                self._fetch(window_start, window_end),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise StoreUnavailable(f"Record store query timed out after {self.timeout}s") from e
        except PyMongoError as e:
            raise StoreUnavailable(f"Record store query failed: {e}") from e

        project_names = {project.id: project.name for project in projects}

        mileage_by_key: dict[tuple[int, date], Decimal] = defaultdict(Decimal)
        for mileage_entry in mileage_entries:
            mileage_by_key[(mileage_entry.project_id, mileage_entry.date)] += mileage_entry.miles

        rows = []
        for entry in time_entries:
            start = self._local(entry.start_time)
            end = self._local(entry.end_time)
            entry_date = start.date()

            rows.append(ReportRow(
                date=entry_date.isoformat(),
                project=project_names.get(entry.project_id, UNKNOWN_PROJECT),
                time_in=start.strftime(CLOCK_FORMAT),
                time_out=end.strftime(CLOCK_FORMAT),
                total_time=round_2(entry.duration),
                mileage=mileage_by_key.get((entry.project_id, entry_date), Decimal("0")),
                notes=entry.notes or "",
            ))

        summary = ReportSummary(
            entry_count=len(rows),
            total_hours=round_2(sum((row.total_time for row in rows), Decimal("0"))),
            total_miles=round_2(sum((row.mileage for row in rows), Decimal("0"))),
        )

        logger.info(
            "Aggregated %d time entries and %d mileage entries (%s hours, %s miles)",
            len(time_entries),
            len(mileage_entries),
            summary.total_hours_text,
            summary.total_miles_text,
        )

        return rows, summary
