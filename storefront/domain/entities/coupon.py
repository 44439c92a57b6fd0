"""Coupon aggregate."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional

from ..exceptions import (
    CouponExpired,
    CouponMinimumNotMet,
    CouponUsageLimitReached,
    InvalidCoupon,
)
from ..value_objects import DiscountRule, Money


@dataclass
class Coupon:
    """
    Coupon with per-user usage ledger.

    Validation order: active, expiry, minimum purchase, usage limits.
    """
    code: str
    name: str
    rule: DiscountRule
    minimum_price: Decimal
    expires_at: datetime
    is_active: bool = True
    usage_limit: Optional[int] = None
    usage_per_user_limit: int = 1
    coupon_used: int = 0
    user_usage: Dict[str, int] = field(default_factory=dict)
    created_at: Optional[datetime] = None

    def usage_by(self, user_id: str) -> int:
        return self.user_usage.get(user_id, 0)

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def validate(self, user_id: str, subtotal: Money, now: datetime) -> None:
        """
        Raise the matching InvalidCoupon subclass when not applicable.
        """
        if not self.is_active:
            raise InvalidCoupon(f"Coupon {self.code} is not active")
        if self.is_expired(now):
            raise CouponExpired(f"Coupon {self.code} has expired")
        if subtotal.amount < self.minimum_price:
            raise CouponMinimumNotMet(
                f"Coupon {self.code} requires a minimum purchase of {self.minimum_price}"
            )
        if self.usage_limit is not None and self.coupon_used >= self.usage_limit:
            raise CouponUsageLimitReached(f"Coupon {self.code} is no longer available")
        if self.usage_by(user_id) >= self.usage_per_user_limit:
            raise CouponUsageLimitReached(f"Coupon {self.code} already used")

    def discount_for(self, subtotal: Money) -> Money:
        """Discount for a subtotal. Pure; never above the subtotal."""
        return Money(amount=self.rule.amount_off(subtotal.amount), currency=subtotal.currency)

    def record_usage(self, user_id: str) -> None:
        usage = dict(self.user_usage)
        usage[user_id] = usage.get(user_id, 0) + 1
        self.user_usage = usage
        self.coupon_used += 1
