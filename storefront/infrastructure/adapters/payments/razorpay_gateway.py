"""
Razorpay Payment Gateway Implementation.

Creates orders through the Orders REST API with HTTP basic auth.
"""
import logging

import aiohttp

from storefront.application.interfaces import IPaymentGateway, RemoteOrder
from storefront.domain.exceptions import InternalError
from storefront.settings.sections.payments import RazorpaySettings


logger = logging.getLogger(__name__)


class RazorpayGateway(IPaymentGateway):

    def __init__(self, settings: RazorpaySettings):
        self.settings = settings
        self._auth = aiohttp.BasicAuth(settings.key_id, settings.key_secret)
        self._orders_url = f"{settings.base_url.rstrip('/')}/orders"
        logger.info("RazorpayGateway initialized")

    @property
    def key_id(self) -> str:
        return self.settings.key_id

    async def create_remote_order(
        self, amount_minor: int, currency: str, receipt: str
    ) -> RemoteOrder:
        payload = {"amount": amount_minor, "currency": currency, "receipt": receipt}
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout_seconds)

        try:
            async with aiohttp.ClientSession(auth=self._auth, timeout=timeout) as session:
                async with session.post(self._orders_url, json=payload) as response:
                    if response.status >= 300:
                        error_text = await response.text()
                        logger.error(f"Razorpay API error: {response.status} - {error_text}")
                        raise InternalError("Payment gateway rejected the order")
                    data = await response.json()
        except aiohttp.ClientError as e:
            logger.error(f"Razorpay request failed: {e}", exc_info=True)
            raise InternalError("Payment gateway unavailable") from e

        logger.info(f"Razorpay order {data['id']} created for receipt {receipt}")
        return RemoteOrder(
            remote_order_id=data["id"],
            amount_minor=int(data.get("amount", amount_minor)),
            currency=data.get("currency", currency),
            receipt=data.get("receipt", receipt),
        )
