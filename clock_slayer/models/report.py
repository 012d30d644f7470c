"""Report model definitions (derived, never persisted)."""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from clock_slayer.utils.numbers import format_2

UNKNOWN_PROJECT = "Unknown"


class ReportRow(BaseModel):
    """One line of the weekly CSV, one per time entry."""

    date: str  # YYYY-MM-DD
    project: str
    time_in: str
    time_out: str
    total_time: Decimal
    mileage: Decimal
    notes: str = ""


class ReportSummary(BaseModel):
    """Totals over the report window."""

    entry_count: int = 0
    total_hours: Decimal = Decimal("0.00")
    total_miles: Decimal = Decimal("0.00")

    @property
    def total_hours_text(self) -> str:
        return format_2(self.total_hours)

    @property
    def total_miles_text(self) -> str:
        return format_2(self.total_miles)


class Attachment(BaseModel):
    """A single e-mail attachment."""

    filename: str
    content: bytes


class ReportEmail(BaseModel):
    """A composed report, ready for the delivery channel."""

    window_start: datetime
    window_end: datetime
    start_date: date
    end_date: date
    subject: str
    body_text: str
    attachment: Attachment
    summary: ReportSummary


class ReportResult(BaseModel):
    """Outcome of one delivered pipeline run."""

    start_date: date
    end_date: date
    filename: str
    entry_count: int
    total_hours: str
    total_miles: str
    delivery_id: Optional[str] = None
