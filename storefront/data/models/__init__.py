"""Database models."""

from .base import Base
from .catalog_model import (
    AddressModel,
    CartItemModel,
    CategoryModel,
    CouponModel,
    OfferModel,
    ProductModel,
    WalletModel,
    WalletTransactionModel,
)
from .order_model import OrderLineModel, OrderModel, ReturnRequestModel

__all__ = [
    "Base",
    "AddressModel",
    "CartItemModel",
    "CategoryModel",
    "CouponModel",
    "OfferModel",
    "OrderLineModel",
    "OrderModel",
    "ProductModel",
    "ReturnRequestModel",
    "WalletModel",
    "WalletTransactionModel",
]
