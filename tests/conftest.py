"""Pytest configuration and fixtures."""
from datetime import timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from clock_slayer.config import settings
from clock_slayer.errors import DeliveryFailure
from clock_slayer.main import app
from clock_slayer.services.report_aggregator import ReportAggregator
from clock_slayer.services.report_service import ReportPipeline


class RecordingDelivery:
    """Delivery channel double that keeps what it was asked to send."""

    def __init__(self):
        self.sent = []
        self.error = None

    async def send(self, subject, body_text, attachment):
        if self.error:
            raise DeliveryFailure(self.error)
        self.sent.append({"subject": subject, "body_text": body_text, "attachment": attachment})
        return {"id": f"msg-{len(self.sent)}"}


@pytest.fixture(autouse=True)
def report_timezone_utc(monkeypatch):
    """Read offset-less timestamps as UTC unless a test picks another zone."""
    monkeypatch.setattr(settings, "report_timezone", "UTC")


@pytest.fixture
def delivery():
    """A delivery channel that records sends."""
    return RecordingDelivery()


@pytest_asyncio.fixture
async def test_db():
    """In-memory Motor-compatible database, fresh for each test."""
    client = AsyncMongoMockClient()
    yield client[f"{settings.mongodb_db_name}_test"]


@pytest_asyncio.fixture
async def app_client(test_db, delivery):
    """
    Create a test client with a clean test database.

    This fixture:
    - Points the database dependency at an in-memory database
    - Installs a report pipeline that reports in UTC and records deliveries
    - Yields an async HTTP client for testing
    """
    from clock_slayer.database import database
    original_db = database.db
    database.db = test_db

    app.state.report_pipeline = ReportPipeline(
        test_db,
        delivery,
        aggregator=ReportAggregator(test_db, timezone=timezone.utc),
    )

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    # Restore original state
    del app.state.report_pipeline
    database.db = original_db
