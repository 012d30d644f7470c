"""Generate the weekly report once, outside the API process.

Usage:
    python scripts/send_report.py
    python scripts/send_report.py --dry-run
    python scripts/send_report.py --closed-window --now 2025-03-08T00:00:00Z
"""
import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from clock_slayer.config import settings
from clock_slayer.database import database
from clock_slayer.errors import ClockSlayerError
from clock_slayer.logging_config import configure_logging
from clock_slayer.services.delivery import ResendDelivery
from clock_slayer.services.report_service import ReportPipeline

logger = logging.getLogger("send_report")


async def send_report(dry_run: bool, closed_window: Optional[bool], now: Optional[datetime]) -> int:
    """Run the pipeline once. Returns a process exit code."""
    await database.connect()
    try:
        pipeline = ReportPipeline(
            database.db,
            ResendDelivery.from_settings(),
            closed_window=closed_window,
        )

        if dry_run:
            email = await pipeline.prepare(now)
            print(f"Subject: {email.subject}")
            print()
            print(email.body_text)
            print()
            print(f"--- {email.attachment.filename} ---")
            print(email.attachment.content.decode("utf-8"), end="")
            return 0

        result = await pipeline.run(now)
        print(f"Sent {result.filename}: {result.entry_count} entries, "
              f"{result.total_hours} hours, {result.total_miles} miles")
        return 0
    except ClockSlayerError as e:
        logger.error("Weekly report failed: %s", e)
        return 1
    finally:
        await database.disconnect()


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate and send the Clock Slayer weekly report")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the e-mail and CSV instead of sending",
    )
    parser.add_argument(
        "--closed-window",
        action="store_true",
        default=None,
        help="Cap the store queries at the window end",
    )
    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        default=None,
        help="End of the report window (ISO-8601, defaults to the current time)",
    )
    args = parser.parse_args()

    configure_logging(settings.log_level)
    return asyncio.run(send_report(args.dry_run, args.closed_window, args.now))


if __name__ == "__main__":
    sys.exit(main())
