"""CSV formatter for report rows."""
import csv
import io
from typing import Iterable

from clock_slayer.models.report import ReportRow
from clock_slayer.utils.numbers import format_2

CSV_HEADER = [
    "Date",
    "Project",
    "Time In",
    "Time Out",
    "Total Time (hours)",
    "Mileage (miles)",
    "Project Notes",
]


def row_to_fields(row: ReportRow) -> list[str]:
    """Render a report row as CSV field strings, in header order."""
    return [
        row.date,
        row.project,
        row.time_in,
        row.time_out,
        format_2(row.total_time),
        format_2(row.mileage),
        row.notes,
    ]


def format_report_csv(rows: Iterable[ReportRow]) -> str:
    """
    Serialize report rows to CSV text.

    Fields containing the delimiter, a quote or a line break are quoted and
    embedded quotes are doubled. An empty row list produces the header only.

    Args:
        rows: Report rows in output order

    Returns:
        CSV text with "\\r\\n" record endings
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")

    writer.writerow(CSV_HEADER)
    for row in rows:
        writer.writerow(row_to_fields(row))

    return buffer.getvalue()
