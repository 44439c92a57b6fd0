"""SQLAlchemy repository implementations."""

from .catalog_repository_impl import (
    SqlAlchemyAddressRepository,
    SqlAlchemyCartRepository,
    SqlAlchemyCouponRepository,
    SqlAlchemyOfferRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyWalletRepository,
)
from .order_repository_impl import (
    SqlAlchemyOrderRepository,
    SqlAlchemyReturnRequestRepository,
)

__all__ = [
    "SqlAlchemyAddressRepository",
    "SqlAlchemyCartRepository",
    "SqlAlchemyCouponRepository",
    "SqlAlchemyOfferRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyReturnRequestRepository",
    "SqlAlchemyWalletRepository",
]
