"""Tests for the one-shot report script."""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock

from clock_slayer.config import settings
from clock_slayer.database import database
from clock_slayer.models.project import ProjectCreate
from clock_slayer.models.time_entry import TimeEntryCreate
from clock_slayer.services.project_service import ProjectService
from clock_slayer.services.time_entry_service import TimeEntryService
from scripts.send_report import send_report

NOW = datetime(2025, 3, 8, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def script_db(test_db, monkeypatch):
    """Point the script's database at the in-memory test database."""
    monkeypatch.setattr(database, "connect", AsyncMock())
    monkeypatch.setattr(database, "disconnect", AsyncMock())
    monkeypatch.setattr(database, "db", test_db)
    return test_db


@pytest.mark.asyncio
class TestSendReportScript:
    """Tests for scripts/send_report.py."""

    async def test_dry_run_prints_email_and_csv(self, script_db, capsys):
        await ProjectService(script_db).create_project(ProjectCreate(id=1, name="Deck Build"))
        await TimeEntryService(script_db).create_entry(TimeEntryCreate(
            id=10,
            project_id=1,
            start_time=datetime(2025, 3, 3, 8, 0, tzinfo=timezone.utc),
            end_time=datetime(2025, 3, 3, 17, 0, tzinfo=timezone.utc),
            duration="9",
        ))

        exit_code = await send_report(dry_run=True, closed_window=None, now=NOW)

        out = capsys.readouterr().out
        assert exit_code == 0
        assert out.startswith("Subject: Clock Slayer Weekly Report - ")
        assert "--- clock-slayer-2025-03-01_to_2025-03-08.csv ---" in out
        assert "2025-03-03,Deck Build,08:00 AM,05:00 PM,9.00,0.00," in out
        database.disconnect.assert_awaited_once()

    async def test_send_failure_exit_code(self, script_db, monkeypatch, capsys):
        """Test a delivery failure is reported as exit code 1."""
        monkeypatch.setattr(settings, "resend_api_key", "")

        exit_code = await send_report(dry_run=False, closed_window=None, now=NOW)

        assert exit_code == 1
        assert "Sent" not in capsys.readouterr().out
        database.disconnect.assert_awaited_once()
