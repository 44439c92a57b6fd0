"""Repository interfaces for Order and ReturnRequest aggregates."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..entities.order import Order
from ..entities.return_request import ReturnRequest


class OrderRepository(ABC):
    """Abstract repository for Order aggregate persistence."""

    @abstractmethod
    async def save(self, order: Order) -> None:
        """Insert or update the order and its lines.

        Args:
            order: Order aggregate to persist
        """
        pass

    @abstractmethod
    async def get(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        """Retrieve order by identifier.

        Args:
            order_id: Order reference
            for_update: lock the row where the database supports it

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_remote_order_id(self, remote_order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str, offset: int = 0, limit: int = 20) -> List[Order]:
        pass

    @abstractmethod
    async def list_all(
        self,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> List[Order]:
        pass

    @abstractmethod
    async def list_between(self, start: Optional[datetime], end: Optional[datetime]) -> List[Order]:
        pass

    @abstractmethod
    async def delete_stale_gateway_orders(self, user_id: str, older_than: datetime) -> int:
        """Delete unpaid gateway orders of `user_id` created before `older_than`.

        Returns:
            Number of orders deleted
        """
        pass


class ReturnRequestRepository(ABC):
    """Abstract repository for return requests."""

    @abstractmethod
    async def save(self, request: ReturnRequest) -> None:
        pass

    @abstractmethod
    async def get(self, return_id: str) -> Optional[ReturnRequest]:
        pass

    @abstractmethod
    async def list(
        self,
        status: Optional[str] = None,
        user_id: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> List[ReturnRequest]:
        pass
