"""
Pricing and offer resolution.

Pure functions: the best unit price for a product given its own offer
percentage and the category offers, plus the checkout totals rule.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from ..entities.catalog import Offer, Product
from ..value_objects import FlatDiscount, Money, PercentageDiscount, quantize

HUNDRED = Decimal("100")
ZERO = Decimal("0")

PRODUCT_OFFER = "product"
CATEGORY_OFFER = "category"


@dataclass(frozen=True)
class PriceQuote:
    original_price: Money
    final_price: Money
    discount_amount: Money
    discount_percentage: Decimal
    applied_offer_type: Optional[str] = None


def offer_percentage(offer: Offer, base_price: Decimal) -> Decimal:
    """Express a category offer as a percentage of `base_price`."""
    rule = offer.rule
    if base_price <= 0:
        return ZERO
    if isinstance(rule, PercentageDiscount):
        if rule.max_discount is None:
            return rule.percent
        off = min(base_price * rule.percent / HUNDRED, rule.max_discount)
        return off / base_price * HUNDRED
    if isinstance(rule, FlatDiscount):
        return rule.amount_off(base_price) / base_price * HUNDRED
    raise TypeError(f"Unsupported discount rule: {rule!r}")


def best_price(product: Product, offers: Iterable[Offer], now: datetime) -> PriceQuote:
    """
    Resolve the best price for `product`.

    The product's own offer competes with every active, in-window
    category offer targeting its category; the highest percentage wins.
    """
    currency = product.price.currency
    base = product.price.amount

    if base <= 0:
        zero = Money.zero(currency)
        return PriceQuote(zero, zero, zero, ZERO, None)

    best = Decimal(product.product_offer or 0)
    applied = PRODUCT_OFFER if best > 0 else None

    for offer in offers:
        if not offer.applies_to(product.category_id, now):
            continue
        pct = offer_percentage(offer, base)
        if pct > best:
            best = pct
            applied = CATEGORY_OFFER

    best = min(max(best, ZERO), HUNDRED)
    discount = quantize(base * best / HUNDRED)
    final = max(quantize(base - discount), ZERO)

    return PriceQuote(
        original_price=product.price,
        final_price=Money(amount=final, currency=currency),
        discount_amount=Money(amount=base - final, currency=currency),
        discount_percentage=quantize(best),
        applied_offer_type=applied,
    )


def shipping_charge_for(subtotal: Money, flat_fee: Decimal, free_above: Decimal) -> Money:
    """Free shipping strictly above the threshold, flat fee otherwise."""
    if subtotal.amount <= 0 or subtotal.amount > free_above:
        return Money.zero(subtotal.currency)
    return Money(amount=flat_fee, currency=subtotal.currency)
