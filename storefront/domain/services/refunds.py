"""
Proportional refund computation.

Shared costs (shipping, coupon discount) are apportioned to each line
by its share of the order's item value:

    refund_i = T_i + (T_i / sum_T) * S - (T_i / sum_T) * C

The result is clamped to [0, remaining order amount]. When the refunded
lines are the last ones still counted in the order, the refund is the
remaining amount itself so no rounding residue is left behind.
"""
from decimal import Decimal
from typing import Sequence

from ..value_objects import quantize

ZERO = Decimal("0")


def proportional_refund(
    line_totals: Sequence[Decimal],
    items_total: Decimal,
    shipping_charge: Decimal,
    coupon_discount: Decimal,
    remaining_amount: Decimal,
    covers_all_remaining: bool = False,
) -> Decimal:
    """
    Refund owed for a batch of lines.

    Args:
        line_totals: total price of each refunded line
        items_total: sum of every line total in the order (as placed)
        shipping_charge: shipping charged at placement
        coupon_discount: coupon discount granted at placement
        remaining_amount: current order amount (upper bound)
        covers_all_remaining: the batch holds every line still refundable

    Returns:
        Refund amount rounded to 2 places
    """
    remaining_amount = max(quantize(remaining_amount), ZERO)
    if covers_all_remaining:
        return remaining_amount
    if items_total <= 0:
        return ZERO

    refund = ZERO
    for total in line_totals:
        share = Decimal(total) / Decimal(items_total)
        refund += Decimal(total) + share * shipping_charge - share * coupon_discount

    refund = quantize(refund)
    if refund < 0:
        return ZERO
    return min(refund, remaining_amount)
