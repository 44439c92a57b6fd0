"""
Mock Payment Gateway Implementation.

Issues remote order ids in-process; used in tests and when the real
gateway is disabled.
"""
import logging
import uuid
from typing import List

from storefront.application.interfaces import IPaymentGateway, RemoteOrder
from storefront.domain.exceptions import InternalError


logger = logging.getLogger(__name__)


class MockPaymentGateway(IPaymentGateway):

    def __init__(self, key_id: str = "rzp_test_mock"):
        self._key_id = key_id
        self.orders_created: List[RemoteOrder] = []
        self.fail_next = False

    @property
    def key_id(self) -> str:
        return self._key_id

    async def create_remote_order(
        self, amount_minor: int, currency: str, receipt: str
    ) -> RemoteOrder:
        if self.fail_next:
            self.fail_next = False
            raise InternalError("Payment gateway unavailable")

        remote = RemoteOrder(
            remote_order_id=f"order_{uuid.uuid4().hex[:14]}",
            amount_minor=amount_minor,
            currency=currency,
            receipt=receipt,
        )
        self.orders_created.append(remote)
        logger.info(f"Mock gateway order {remote.remote_order_id} for {amount_minor} {currency}")
        return remote
