"""Catalog entities: products, category offers and address book entries."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from ..value_objects import DiscountRule, Money


@dataclass
class Product:
    product_id: str
    name: str
    category_id: str
    price: Money
    stock: int
    product_offer: Decimal = Decimal("0")
    is_listed: bool = True
    is_deleted: bool = False

    @property
    def is_available(self) -> bool:
        return self.is_listed and not self.is_deleted


@dataclass
class Offer:
    """Category-wide offer applied at price resolution."""
    offer_id: str
    name: str
    rule: DiscountRule
    category_ids: List[str] = field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True

    def applies_to(self, category_id: str, now: datetime) -> bool:
        if not self.is_active or category_id not in self.category_ids:
            return False
        if self.start_date is not None and now < self.start_date:
            return False
        if self.end_date is not None and now > self.end_date:
            return False
        return True


@dataclass
class Address:
    address_id: str
    user_id: str
    name: str
    line1: str
    city: str
    state: str
    pincode: str
    phone: str
    line2: str = ""
    landmark: str = ""
