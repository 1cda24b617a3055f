"""
Notification Gateway
Delivers a rendered email. ``send`` never raises; the outcome is returned.
"""
import asyncio
import logging
import smtplib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

from app.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class NotificationResult:
    """Result of a delivery attempt"""
    success: bool
    error: Optional[str] = None


class NotificationGateway(ABC):
    """Interface for outbound email delivery"""

    @abstractmethod
    async def send(self, to: str, subject: str, html_body: str) -> NotificationResult:
        """Send an email; implementations must not raise"""


class SmtpNotificationGateway(NotificationGateway):
    """Service for sending emails over SMTP with STARTTLS"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_user = settings.smtp_user
        self.smtp_password = settings.smtp_password
        self.email_from = settings.sender_address
        self.email_from_name = settings.sender_name
        if not settings.email_enabled:
            logger.warning(
                "SMTP_HOST, SMTP_USER or SMTP_PASSWORD not set. Email notifications will be disabled."
            )

    def _build_message(self, to: str, subject: str, html_body: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = f"{self.email_from_name} <{self.email_from}>"
        message["To"] = to
        message.attach(MIMEText(html_body, "html"))
        return message

    def _deliver(self, message: MIMEMultipart) -> None:
        with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
            server.starttls()
            server.login(self.smtp_user, self.smtp_password)
            server.send_message(message)

    async def send(self, to: str, subject: str, html_body: str) -> NotificationResult:
        if not self.settings.email_enabled:
            return NotificationResult(success=False, error="Email transporter not available.")
        if not to:
            return NotificationResult(success=False, error="Recipient address is empty.")
        try:
            message = self._build_message(to, subject, html_body)
            # smtplib blocks; keep it off the event loop
            await asyncio.to_thread(self._deliver, message)
            return NotificationResult(success=True)
        except Exception as e:
            return NotificationResult(success=False, error=str(e))
