"""
Mock Notification Service Implementation.

Records notifications in memory for tests and local runs.
"""
from typing import Any, Dict
import logging

from storefront.application.interfaces import INotificationService


logger = logging.getLogger(__name__)


class MockNotificationService(INotificationService):
    """Logs notifications instead of sending them."""

    def __init__(self):
        self.notifications_sent = []
        logger.info("MockNotificationService initialized (console logging)")

    async def send_order_confirmation(self, email: str, summary: Dict[str, Any]) -> None:
        notification = {
            "type": "order_confirmation",
            "email": email,
            "order_id": summary.get("order_id"),
            "summary": summary,
        }
        self.notifications_sent.append(notification)

        logger.info(
            f"🔔 ORDER CONFIRMATION:\n"
            f"   To: {email}\n"
            f"   Order: {summary.get('order_id')}\n"
            f"   Amount: {summary.get('order_amount')} {summary.get('currency')}"
        )

    async def notify(self, message: str, severity: int = 50) -> None:
        self.notifications_sent.append(
            {"type": "notify", "message": message, "severity": severity}
        )
        logger.info(f"🔔 NOTIFY [{severity}]: {message}")
