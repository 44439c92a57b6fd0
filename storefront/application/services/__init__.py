"""Application services - one class per use-case area."""

from .cart_service import CartService
from .checkout_service import CheckoutService
from .coupon_service import CouponService
from .order_service import OrderService
from .report_service import ReportService
from .return_service import ReturnService
from .wallet_service import WalletService

__all__ = [
    "CartService",
    "CheckoutService",
    "CouponService",
    "OrderService",
    "ReportService",
    "ReturnService",
    "WalletService",
]
