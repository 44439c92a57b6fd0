"""Application layer interfaces."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class RemoteOrder:
    """Payment-provider-side order correlated with a local order."""
    remote_order_id: str
    amount_minor: int
    currency: str
    receipt: str


class IPaymentGateway(ABC):
    """
    Interface for the online payment provider.

    Only remote order creation is consumed; payment signatures are
    verified locally with the shared secret.
    """

    @abstractmethod
    async def create_remote_order(
        self, amount_minor: int, currency: str, receipt: str
    ) -> RemoteOrder:
        """
        Create an order on the provider side.

        Args:
            amount_minor: Amount in the smallest currency unit (paise)
            currency: ISO currency code
            receipt: Local receipt reference

        Returns:
            RemoteOrder with the provider's identifier

        Raises:
            InternalError: provider unreachable or rejected the request
        """
        pass

    @property
    @abstractmethod
    def key_id(self) -> str:
        """Public key handed to the browser checkout widget."""
        pass


class INotificationService(ABC):
    """
    Interface for customer notifications.

    Called after commit; implementations must not raise for delivery
    problems they can log instead.
    """

    @abstractmethod
    async def send_order_confirmation(self, email: str, summary: Dict[str, Any]) -> None:
        """
        Send the order confirmation to the customer.

        Args:
            email: Customer email address
            summary: Order summary (order id, lines, totals, address)
        """
        pass

    async def notify(self, message: str, severity: int = 50) -> None:
        """Generic operational message; default is a no-op."""
        pass


__all__ = ["IPaymentGateway", "INotificationService", "RemoteOrder"]
