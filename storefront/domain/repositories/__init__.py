"""Repository interfaces (ports)."""

from .catalog_repository import (
    AddressRepository,
    CartRepository,
    CouponRepository,
    OfferRepository,
    ProductRepository,
    WalletRepository,
)
from .order_repository import OrderRepository, ReturnRequestRepository

__all__ = [
    "AddressRepository",
    "CartRepository",
    "CouponRepository",
    "OfferRepository",
    "OrderRepository",
    "ProductRepository",
    "ReturnRequestRepository",
    "WalletRepository",
]
