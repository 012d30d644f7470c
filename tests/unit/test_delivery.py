"""Tests for the Resend delivery channel."""
import base64
import json

import httpx
import pytest

from clock_slayer.errors import DeliveryFailure
from clock_slayer.models.report import Attachment
from clock_slayer.services.delivery import ResendDelivery

ATTACHMENT = Attachment(filename="clock-slayer-2025-03-01_to_2025-03-08.csv", content=b"Date,Project\n")


def make_delivery(handler, **overrides):
    options = {
        "api_key": "re_test",
        "sender": "Clock Slayer <reports@example.com>",
        "recipients": ["owner@example.com"],
        "transport": httpx.MockTransport(handler),
    }
    options.update(overrides)
    return ResendDelivery(**options)


@pytest.mark.asyncio
class TestResendDelivery:
    """Tests for ResendDelivery.send."""

    async def test_send_success(self):
        """Test the request payload and returned response."""
        captured = {}

        def handler(request):
            captured["request"] = request
            return httpx.Response(200, json={"id": "email-123"})

        delivery = make_delivery(handler)
        response = await delivery.send("Weekly Report", "Summary body", ATTACHMENT)

        assert response == {"id": "email-123"}
        request = captured["request"]
        assert str(request.url) == "https://api.resend.com/emails"
        assert request.headers["Authorization"] == "Bearer re_test"

        payload = json.loads(request.content)
        assert payload["from"] == "Clock Slayer <reports@example.com>"
        assert payload["to"] == ["owner@example.com"]
        assert payload["subject"] == "Weekly Report"
        assert payload["text"] == "Summary body"
        assert len(payload["attachments"]) == 1
        assert payload["attachments"][0]["filename"] == ATTACHMENT.filename
        assert base64.b64decode(payload["attachments"][0]["content"]) == b"Date,Project\n"

    async def test_send_rejected(self):
        """Test an error status becomes DeliveryFailure."""
        def handler(request):
            return httpx.Response(422, json={"message": "Invalid `to` field"})

        delivery = make_delivery(handler)

        with pytest.raises(DeliveryFailure, match="422"):
            await delivery.send("Weekly Report", "body", ATTACHMENT)

    async def test_send_unreachable(self):
        """Test a transport error becomes DeliveryFailure."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        delivery = make_delivery(handler)

        with pytest.raises(DeliveryFailure, match="unreachable"):
            await delivery.send("Weekly Report", "body", ATTACHMENT)

    async def test_send_without_api_key(self):
        """Test a missing API key fails before any request."""
        def handler(request):
            raise AssertionError("no request expected")

        delivery = make_delivery(handler, api_key="")

        with pytest.raises(DeliveryFailure, match="API key"):
            await delivery.send("Weekly Report", "body", ATTACHMENT)

    async def test_send_without_recipients(self):
        """Test an empty recipient list fails."""
        def handler(request):
            raise AssertionError("no request expected")

        delivery = make_delivery(handler, recipients=[])

        with pytest.raises(DeliveryFailure, match="recipients"):
            await delivery.send("Weekly Report", "body", ATTACHMENT)
