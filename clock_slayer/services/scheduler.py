"""Weekly report scheduler."""
import logging
from datetime import time
from typing import Optional
from zoneinfo import ZoneInfo

from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from clock_slayer.config import settings
from clock_slayer.errors import ReportAlreadyRunning
from clock_slayer.models.report import ReportResult

logger = logging.getLogger(__name__)

DAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

JOB_ID = "weekly-report"

# a run delayed by a busy loop or a restart still goes out within the hour
MISFIRE_GRACE_SECONDS = 3600


def parse_day_of_week(value: str) -> int:
    """
    Parse a day name to a weekday number (Monday is 0).

    Examples:
        >>> parse_day_of_week("Friday")
        4
        >>> parse_day_of_week("fri")
        4
    """
    name = value.strip().lower()
    for index, day in enumerate(DAY_NAMES):
        if name == day or (len(name) >= 3 and day.startswith(name)):
            return index
    raise ValueError(f"Unknown day of week: {value!r}")


def parse_time_of_day(value: str) -> time:
    """Parse "HH:MM" (24-hour clock)."""
    try:
        hour, minute = (int(part) for part in value.strip().split(":"))
        return time(hour, minute)
    except ValueError as e:
        raise ValueError(f"Invalid time of day: {value!r} (expected HH:MM)") from e


class WeeklySchedule:
    """A fixed day of week and wall-clock time in a time zone."""

    def __init__(self, day_of_week: int, at: time, tz: ZoneInfo):
        if not 0 <= day_of_week <= 6:
            raise ValueError("day_of_week must be 0 (Monday) to 6 (Sunday)")
        self.day_of_week = day_of_week
        self.at = at
        self.timezone = tz

    @classmethod
    def from_settings(cls) -> "WeeklySchedule":
        """Build the schedule from application settings."""
        return cls(
            day_of_week=parse_day_of_week(settings.report_day_of_week),
            at=parse_time_of_day(settings.report_time),
            tz=ZoneInfo(settings.report_timezone),
        )

    def describe(self) -> str:
        return f"{DAY_NAMES[self.day_of_week].title()}s at {self.at:%H:%M} {self.timezone.key}"

    def trigger(self) -> CronTrigger:
        """Cron trigger firing on this day and wall-clock time, DST included."""
        return CronTrigger(
            day_of_week=DAY_NAMES[self.day_of_week][:3],
            hour=self.at.hour,
            minute=self.at.minute,
            timezone=self.timezone,
        )


class ReportScheduler:
    """
    Runs the report pipeline on a weekly schedule.

    Scheduled runs never raise: failures are logged and the job waits for
    the next firing. Instances do not coordinate with each other, so two
    processes against one database each send a report.
    """

    def __init__(self, pipeline, schedule: WeeklySchedule):
        """
        Initialize scheduler.

        Args:
            pipeline: ReportPipeline to run
            schedule: When to run it
        """
        self.pipeline = pipeline
        self.schedule = schedule
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def job(self) -> Optional[Job]:
        if self._scheduler is None:
            return None
        return self._scheduler.get_job(JOB_ID)

    def start(self) -> None:
        """Start the scheduler on the running event loop."""
        if self.is_running:
            return
        self._scheduler = AsyncIOScheduler(timezone=self.schedule.timezone)
        self._scheduler.add_job(
            self.fire,
            self.schedule.trigger(),
            id=JOB_ID,
            name="Weekly report",
            max_instances=1,
            coalesce=True,
            misfire_grace_time=MISFIRE_GRACE_SECONDS,
        )
        self._scheduler.start()
        logger.info("Weekly report scheduled for %s", self.schedule.describe())

    async def stop(self) -> None:
        """Shut the scheduler down without waiting for a running report."""
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Weekly report scheduler stopped")

    async def fire(self) -> Optional[ReportResult]:
        """Run the pipeline once; errors are logged, never raised."""
        logger.info("Running scheduled weekly email task...")
        try:
            return await self.pipeline.run()
        except ReportAlreadyRunning:
            logger.warning("Skipping scheduled report: a report is already being generated")
        except Exception:
            logger.exception("Error sending weekly email")
        return None
