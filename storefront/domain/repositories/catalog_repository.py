"""Repository interfaces for catalog, cart, coupon and wallet persistence."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..entities.cart import Cart
from ..entities.catalog import Address, Offer, Product
from ..entities.coupon import Coupon
from ..entities.wallet import Wallet, WalletTransaction


class ProductRepository(ABC):

    @abstractmethod
    async def get(self, product_id: str) -> Optional[Product]:
        pass

    @abstractmethod
    async def adjust_stock(self, product_id: str, delta: int) -> None:
        """Atomically add `delta` to stock, never letting it go below zero.

        Raises:
            InsufficientStock: a decrement larger than the stock on hand
            NotFound: unknown product
        """
        pass


class OfferRepository(ABC):

    @abstractmethod
    async def list_active(self, now: datetime) -> List[Offer]:
        pass


class AddressRepository(ABC):

    @abstractmethod
    async def get_for_user(self, address_id: str, user_id: str) -> Optional[Address]:
        pass


class CartRepository(ABC):

    @abstractmethod
    async def get(self, user_id: str) -> Cart:
        """Return the user's cart (empty when none exists)."""
        pass

    @abstractmethod
    async def save(self, cart: Cart) -> None:
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        pass


class CouponRepository(ABC):

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[Coupon]:
        pass

    @abstractmethod
    async def list(self, active_only: bool = False) -> List[Coupon]:
        pass

    @abstractmethod
    async def save(self, coupon: Coupon) -> None:
        pass


class WalletRepository(ABC):

    @abstractmethod
    async def get_or_create(self, user_id: str) -> Wallet:
        """Load the user's wallet, creating an empty one on first access."""
        pass

    @abstractmethod
    async def save(self, wallet: Wallet) -> None:
        """Persist the balance and append `wallet.new_transactions`."""
        pass

    @abstractmethod
    async def list_transactions(
        self, user_id: str, offset: int = 0, limit: Optional[int] = 20
    ) -> List[WalletTransaction]:
        """Transactions newest first; `limit=None` returns the full ledger."""
        pass

    @abstractmethod
    async def count_transactions(self, user_id: str) -> int:
        pass
