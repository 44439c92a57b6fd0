"""
Discount rules shared by coupons and category offers.

A rule is either a percentage of a base amount (optionally capped)
or a flat amount. Rules are pure: they never mutate anything.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from .money import quantize

PERCENTAGE = "percentage"
FLAT = "flat"


@dataclass(frozen=True)
class PercentageDiscount:
    """`percent` of the base, never more than `max_discount` when set."""
    percent: Decimal
    max_discount: Optional[Decimal] = None

    kind = PERCENTAGE

    def __post_init__(self):
        object.__setattr__(self, "percent", Decimal(str(self.percent)))
        if self.max_discount is not None:
            object.__setattr__(self, "max_discount", Decimal(str(self.max_discount)))
        if self.percent < 0 or self.percent > 100:
            raise ValueError(f"Percentage must be within 0..100, got: {self.percent}")

    @property
    def value(self) -> Decimal:
        return self.percent

    def amount_off(self, base: Decimal) -> Decimal:
        off = base * self.percent / Decimal(100)
        if self.max_discount is not None and off > self.max_discount:
            off = self.max_discount
        return quantize(min(off, base))


@dataclass(frozen=True)
class FlatDiscount:
    """A fixed amount off, never more than the base itself."""
    amount: Decimal
    max_discount: Optional[Decimal] = None

    kind = FLAT

    def __post_init__(self):
        object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if self.max_discount is not None:
            object.__setattr__(self, "max_discount", Decimal(str(self.max_discount)))
        if self.amount < 0:
            raise ValueError(f"Flat discount must be non-negative, got: {self.amount}")

    @property
    def value(self) -> Decimal:
        return self.amount

    def amount_off(self, base: Decimal) -> Decimal:
        off = self.amount
        if self.max_discount is not None and off > self.max_discount:
            off = self.max_discount
        return quantize(min(off, base))


DiscountRule = Union[PercentageDiscount, FlatDiscount]


def discount_rule_from(
    kind: str, value: Decimal, max_discount: Optional[Decimal] = None
) -> DiscountRule:
    """Build a rule from its persisted (kind, value, cap) triple."""
    if kind == PERCENTAGE:
        return PercentageDiscount(percent=value, max_discount=max_discount)
    if kind == FLAT:
        return FlatDiscount(amount=value, max_discount=max_discount)
    raise ValueError(f"Unknown discount type: {kind}")
