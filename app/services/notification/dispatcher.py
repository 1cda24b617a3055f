"""
Notification Dispatcher
Fire-and-forget delivery of client and admin emails.

Each send runs as its own asyncio task. The outcome is logged and never
propagates to the caller; there is a single attempt per email.
"""
import asyncio
import logging
from typing import Optional, Set

from app.core.config import Settings
from app.services.notification.gateway import NotificationGateway, NotificationResult
from app.services.notification.templates import Email, EmailTemplates

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Schedules emails without blocking the committed state transition"""

    def __init__(self, gateway: NotificationGateway, settings: Settings):
        self.gateway = gateway
        self.admin_email = settings.admin_receiving_email
        self.templates = EmailTemplates(settings)
        self._pending: Set[asyncio.Task] = set()

    async def _deliver(self, to: str, email: Email, audience: str) -> NotificationResult:
        subject, html_body = email
        try:
            result = await self.gateway.send(to, subject, html_body)
        except Exception as e:
            # Gateways must not raise; treat it as a failed delivery
            result = NotificationResult(success=False, error=str(e))

        if result.success:
            logger.info(f"[EMAIL] {audience} notification sent to {to}: {subject}")
        else:
            logger.error(f"[EMAIL] Failed to send {audience} notification to {to}: {result.error}")
        return result

    def dispatch(self, to: Optional[str], email: Email, audience: str = "client") -> Optional[asyncio.Task]:
        """Schedule one email and return its task"""
        if not to:
            logger.warning(f"[EMAIL] No recipient for {audience} notification: {email[0]}")
            return None
        task = asyncio.create_task(self._deliver(to, email, audience))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def notify_client(self, to: Optional[str], email: Email) -> Optional[asyncio.Task]:
        return self.dispatch(to, email, audience="client")

    def notify_admin(self, email: Email) -> Optional[asyncio.Task]:
        """Notify the owner inbox when one is configured"""
        if not self.admin_email:
            logger.warning("ADMIN_RECEIVING_EMAIL is not set. Owner notification email not sent.")
            return None
        return self.dispatch(self.admin_email, email, audience="admin")

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every scheduled email to finish (shutdown, tests)"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
