"""Report pipeline - aggregate, format and deliver the weekly report."""
import asyncio
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from clock_slayer.config import settings
from clock_slayer.errors import ReportAlreadyRunning
from clock_slayer.models.report import Attachment, ReportEmail, ReportResult, ReportSummary
from clock_slayer.services.csv_formatter import format_report_csv
from clock_slayer.services.report_aggregator import ReportAggregator
from clock_slayer.utils.dates import as_utc

logger = logging.getLogger(__name__)


def report_filename(start_date: date, end_date: date) -> str:
    """CSV attachment name, e.g. clock-slayer-2025-03-01_to_2025-03-08.csv."""
    return f"clock-slayer-{start_date.isoformat()}_to_{end_date.isoformat()}.csv"


def _short_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def compose_body(summary: ReportSummary, date_range: str) -> str:
    """Plain-text e-mail body with the summary block."""
    return "\n".join([
        "Clock Slayer Weekly Report",
        date_range,
        "",
        "Summary:",
        f"- Total Entries: {summary.entry_count}",
        f"- Total Hours: {summary.total_hours_text}",
        f"- Total Miles: {summary.total_miles_text}",
        "",
        "Please see the attached CSV file for detailed breakdown.",
        "",
        "This is an automated report from Clock Slayer.",
    ])


class ReportPipeline:
    """
    Runs aggregation, CSV formatting and delivery as one unit.

    Runs are serialized: a run requested while another is in flight raises
    ReportAlreadyRunning instead of sending a second report.
    """

    def __init__(
        self,
        db,
        delivery,
        aggregator: Optional[ReportAggregator] = None,
        window_days: Optional[int] = None,
        closed_window: Optional[bool] = None,
    ):
        """
        Initialize pipeline.

        Args:
            db: Database connection
            delivery: Delivery channel with an async send(subject, body_text, attachment)
            aggregator: Optional aggregator (built from db when omitted)
            window_days: Trailing window length in days
            closed_window: Cap the store queries at the window end
        """
        self.aggregator = aggregator or ReportAggregator(db)
        self.delivery = delivery
        self.window_days = settings.report_window_days if window_days is None else window_days
        self.closed_window = settings.report_closed_window if closed_window is None else closed_window
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def report_window(self, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
        """Trailing window ending at now."""
        window_end = as_utc(now) if now else datetime.now(timezone.utc)
        return window_end - timedelta(days=self.window_days), window_end

    async def prepare(self, now: Optional[datetime] = None) -> ReportEmail:
        """
        Aggregate and format the report without sending it.

        Raises:
            StoreUnavailable: If the record store cannot be read
        """
        window_start, window_end = self.report_window(now)
        rows, summary = await self.aggregator.generate_report(
            window_start,
            window_end if self.closed_window else None,
        )
        csv_text = format_report_csv(rows)

        tz = self.aggregator.timezone
        start_date = window_start.astimezone(tz).date()
        end_date = window_end.astimezone(tz).date()
        date_range = f"{_short_date(start_date)} - {_short_date(end_date)}"

        return ReportEmail(
            window_start=window_start,
            window_end=window_end,
            start_date=start_date,
            end_date=end_date,
            subject=f"Clock Slayer Weekly Report - {date_range}",
            body_text=compose_body(summary, date_range),
            attachment=Attachment(
                filename=report_filename(start_date, end_date),
                content=csv_text.encode("utf-8"),
            ),
            summary=summary,
        )

    async def run(self, now: Optional[datetime] = None) -> ReportResult:
        """
        Generate and deliver the report.

        Args:
            now: End of the report window (defaults to the current time)

        Returns:
            Result with the window, totals and provider message id

        Raises:
            ReportAlreadyRunning: If another run is in progress
            StoreUnavailable: If the record store cannot be read
            DeliveryFailure: If the e-mail could not be sent
        """
        if self._lock.locked():
            raise ReportAlreadyRunning("A weekly report is already being generated")

        async with self._lock:
            logger.info("Generating weekly report...")
            email = await self.prepare(now)

            response = await self.delivery.send(
                email.subject,
                email.body_text,
                email.attachment,
            )

            logger.info(
                "Weekly report sent: %s (%d entries)",
                email.attachment.filename,
                email.summary.entry_count,
            )

            return ReportResult(
                start_date=email.start_date,
                end_date=email.end_date,
                filename=email.attachment.filename,
                entry_count=email.summary.entry_count,
                total_hours=email.summary.total_hours_text,
                total_miles=email.summary.total_miles_text,
                delivery_id=(response or {}).get("id"),
            )
