"""Tests for offer resolution and shipping."""

from datetime import timedelta
from decimal import Decimal

from storefront.domain.entities import Offer, Product
from storefront.domain.services.pricing import (
    CATEGORY_OFFER,
    PRODUCT_OFFER,
    best_price,
    shipping_charge_for,
)
from storefront.domain.value_objects import FlatDiscount, Money, PercentageDiscount, utcnow

D = Decimal
CATEGORY = "cat-1"


def _product(price="1000", product_offer="0") -> Product:
    return Product(
        product_id="p1",
        name="Laptop",
        category_id=CATEGORY,
        price=Money(D(price)),
        stock=5,
        product_offer=D(product_offer),
    )


def _offer(rule, **kwargs) -> Offer:
    now = utcnow()
    defaults = dict(
        offer_id="o1",
        name="Festival",
        rule=rule,
        category_ids=[CATEGORY],
        start_date=now - timedelta(days=1),
        end_date=now + timedelta(days=1),
    )
    defaults.update(kwargs)
    return Offer(**defaults)


def test_no_offers_keeps_list_price():
    quote = best_price(_product(), [], utcnow())
    assert quote.final_price == Money(D("1000"))
    assert quote.discount_percentage == D("0")
    assert quote.applied_offer_type is None


def test_product_offer_applies():
    quote = best_price(_product(product_offer="10"), [], utcnow())
    assert quote.final_price == Money(D("900"))
    assert quote.applied_offer_type == PRODUCT_OFFER


def test_best_of_product_and_category_offer_wins():
    offers = [_offer(PercentageDiscount(D("20")))]
    quote = best_price(_product(product_offer="10"), offers, utcnow())

    assert quote.final_price == Money(D("800"))
    assert quote.discount_amount == Money(D("200"))
    assert quote.applied_offer_type == CATEGORY_OFFER


def test_flat_category_offer_compared_as_percentage():
    offers = [_offer(FlatDiscount(D("150")))]
    quote = best_price(_product(product_offer="10"), offers, utcnow())

    assert quote.discount_percentage == D("15.00")
    assert quote.final_price == Money(D("850"))


def test_capped_percentage_offer_loses_to_product_offer():
    offers = [_offer(PercentageDiscount(D("50"), max_discount=D("50")))]
    quote = best_price(_product(product_offer="10"), offers, utcnow())

    assert quote.final_price == Money(D("900"))
    assert quote.applied_offer_type == PRODUCT_OFFER


def test_inactive_and_expired_offers_are_ignored():
    now = utcnow()
    offers = [
        _offer(PercentageDiscount(D("30")), is_active=False),
        _offer(PercentageDiscount(D("40")), end_date=now - timedelta(hours=1)),
        _offer(PercentageDiscount(D("50")), category_ids=["other"]),
    ]
    quote = best_price(_product(), offers, now)
    assert quote.final_price == Money(D("1000"))


def test_shipping_free_strictly_above_threshold():
    fee, threshold = D("50"), D("500")
    assert shipping_charge_for(Money(D("500")), fee, threshold) == Money(D("50"))
    assert shipping_charge_for(Money(D("500.01")), fee, threshold) == Money(D("0"))
    assert shipping_charge_for(Money(D("0")), fee, threshold) == Money(D("0"))
