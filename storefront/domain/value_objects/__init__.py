"""Domain value objects - pure Python immutable types."""

from .discount import (
    FLAT,
    PERCENTAGE,
    DiscountRule,
    FlatDiscount,
    PercentageDiscount,
    discount_rule_from,
)
from .identifiers import ExecutionID, as_naive_utc, new_id, new_order_id, utcnow
from .money import DEFAULT_CURRENCY, Money, quantize

__all__ = [
    "Money",
    "quantize",
    "DEFAULT_CURRENCY",
    "ExecutionID",
    "new_id",
    "new_order_id",
    "utcnow",
    "as_naive_utc",
    "DiscountRule",
    "PercentageDiscount",
    "FlatDiscount",
    "discount_rule_from",
    "PERCENTAGE",
    "FLAT",
]
