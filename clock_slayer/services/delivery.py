"""Delivery channel - sends the report e-mail through the Resend API."""
import base64
import logging
from typing import Optional

import httpx

from clock_slayer.config import settings
from clock_slayer.errors import DeliveryFailure
from clock_slayer.models.report import Attachment

logger = logging.getLogger(__name__)


class ResendDelivery:
    """Sends a text e-mail with one attachment via https://resend.com."""

    def __init__(
        self,
        api_key: str,
        sender: str,
        recipients: list[str],
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize delivery channel.

        Args:
            api_key: Resend API key
            sender: From address, e.g. "Clock Slayer <reports@example.com>"
            recipients: To addresses
            api_url: Resend e-mail endpoint
            timeout: Seconds allowed for the HTTP call
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.api_key = api_key
        self.sender = sender
        self.recipients = recipients
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls) -> "ResendDelivery":
        """Build a delivery channel from application settings."""
        return cls(
            api_key=settings.resend_api_key,
            sender=settings.report_sender,
            recipients=settings.report_recipients_list,
            api_url=settings.resend_api_url,
            timeout=settings.delivery_timeout_seconds,
        )

    def _payload(self, subject: str, body_text: str, attachment: Attachment) -> dict:
        return {
            "from": self.sender,
            "to": self.recipients,
            "subject": subject,
            "text": body_text,
            "attachments": [
                {
                    "filename": attachment.filename,
                    "content": base64.b64encode(attachment.content).decode("ascii"),
                }
            ],
        }

    async def send(self, subject: str, body_text: str, attachment: Attachment) -> dict:
        """
        Send an e-mail.

        Args:
            subject: Subject line
            body_text: Plain-text body
            attachment: The single attachment

        Returns:
            Parsed JSON response from Resend (contains the message id)

        Raises:
            DeliveryFailure: If the request fails, times out or is rejected
        """
        if not self.api_key:
            raise DeliveryFailure("Resend API key is not configured")
        if not self.recipients:
            raise DeliveryFailure("No report recipients configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.api_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json=self._payload(subject, body_text, attachment),
                )
        except httpx.HTTPError as e:
            raise DeliveryFailure(f"Resend API unreachable: {e}") from e

        if response.is_error:
            raise DeliveryFailure(f"Resend API error ({response.status_code}): {response.text}")

        logger.info("Report e-mail accepted by Resend for %s", ", ".join(self.recipients))
        return response.json()
