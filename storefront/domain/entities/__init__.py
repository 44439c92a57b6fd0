"""Domain entities and aggregates."""

from .cart import Cart, CartItem
from .catalog import Address, Offer, Product
from .coupon import Coupon
from .order import DeliveryAddress, Order, OrderLine, RefundOutcome
from .return_request import ReturnItem, ReturnRequest
from .wallet import Wallet, WalletTransaction

__all__ = [
    "Address",
    "Cart",
    "CartItem",
    "Coupon",
    "DeliveryAddress",
    "Offer",
    "Order",
    "OrderLine",
    "Product",
    "RefundOutcome",
    "ReturnItem",
    "ReturnRequest",
    "Wallet",
    "WalletTransaction",
]
