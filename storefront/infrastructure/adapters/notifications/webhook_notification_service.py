"""
Webhook Notification Service Implementation.

Posts order confirmations to a mail relay webhook.
"""
from typing import Any, Dict
import logging

import aiohttp

from storefront.application.interfaces import INotificationService
from storefront.settings.sections.notifications import NotificationSettings


logger = logging.getLogger(__name__)


class WebhookNotificationService(INotificationService):
    """
    Webhook implementation of notification service.

    Delivery failures are logged; they never propagate to the caller.
    """

    def __init__(self, settings: NotificationSettings):
        self.settings = settings
        self.webhook_url = settings.webhook_url
        self.prefix = settings.prefix
        logger.info("WebhookNotificationService initialized")

    async def send_order_confirmation(self, email: str, summary: Dict[str, Any]) -> None:
        payload = {
            "from": self.settings.sender,
            "to": email,
            "subject": f"{self.prefix} Order {summary.get('order_id')} confirmed",
            "template": "order_confirmation",
            "data": summary,
        }
        await self._post(payload)

    async def notify(self, message: str, severity: int = 50) -> None:
        await self._post({"text": f"{self.prefix} {message}", "severity": severity})

    async def _post(self, payload: Dict[str, Any]) -> None:
        if not self.webhook_url:
            logger.warning("Notification webhook_url not configured, skipping notification")
            return

        timeout = aiohttp.ClientTimeout(total=self.settings.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.webhook_url, json=payload) as response:
                    if response.status >= 300:
                        error_text = await response.text()
                        logger.error(
                            f"Notification webhook error: {response.status} - {error_text}"
                        )
                    else:
                        logger.info("Notification sent successfully")
        except Exception as e:
            logger.error(f"Failed to send notification: {e}", exc_info=True)
