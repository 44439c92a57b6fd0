"""Tests for the proportional refund rule."""

import random
from decimal import Decimal

import pytest

from storefront.domain.entities import DeliveryAddress, Order
from storefront.domain.enums import OrderStatus, PaymentMethod
from storefront.domain.services.refunds import proportional_refund
from storefront.domain.value_objects import Money

D = Decimal


def test_refund_shares_coupon_by_line_value():
    """A 400 line of a 1000 order with a 100 coupon refunds 360."""
    refund = proportional_refund(
        line_totals=[D("400")],
        items_total=D("1000"),
        shipping_charge=D("0"),
        coupon_discount=D("100"),
        remaining_amount=D("900"),
    )
    assert refund == D("360.00")


def test_refund_includes_shipping_share():
    refund = proportional_refund(
        line_totals=[D("200")],
        items_total=D("400"),
        shipping_charge=D("50"),
        coupon_discount=D("0"),
        remaining_amount=D("450"),
    )
    assert refund == D("225.00")


def test_refund_never_negative():
    """A coupon larger than the line's share clamps the refund at zero."""
    refund = proportional_refund(
        line_totals=[D("100")],
        items_total=D("1000"),
        shipping_charge=D("0"),
        coupon_discount=D("2000"),
        remaining_amount=D("0"),
    )
    assert refund == D("0")


def test_refund_capped_by_remaining_amount():
    refund = proportional_refund(
        line_totals=[D("500")],
        items_total=D("1000"),
        shipping_charge=D("100"),
        coupon_discount=D("0"),
        remaining_amount=D("300"),
    )
    assert refund == D("300.00")


def test_last_batch_takes_remaining_amount():
    refund = proportional_refund(
        line_totals=[D("100")],
        items_total=D("300"),
        shipping_charge=D("0"),
        coupon_discount=D("10"),
        remaining_amount=D("96.66"),
        covers_all_remaining=True,
    )
    assert refund == D("96.66")


def test_zero_items_total_refunds_nothing():
    assert proportional_refund([D("0")], D("0"), D("0"), D("0"), D("10")) == D("0")


def _order(totals, shipping="0", coupon="0") -> Order:
    lines = [
        Order.new_line(f"p{i}", f"Product {i}", 1, Money(D(t)), Money(D(t)))
        for i, t in enumerate(totals)
    ]
    order = Order.place(
        user_id="u1",
        lines=lines,
        delivery_address=DeliveryAddress(
            name="A", line1="L1", city="C", state="S", pincode="600001", phone="99"
        ),
        payment_method=PaymentMethod.WALLET,
        shipping_charge=Money(D(shipping)),
        coupon_discount=Money(D(coupon)),
    )
    order.mark_paid()
    return order


def test_three_equal_lines_leave_no_rounding_residue():
    order = _order(["100", "100", "100"], coupon="10")
    refunds = [order.cancel_line(line.line_id, "changed mind").amount.amount for line in order.lines]

    assert refunds[:2] == [D("96.67"), D("96.67")]
    assert refunds[2] == D("96.66")
    assert sum(refunds) == D("290.00")
    assert order.order_amount.amount == D("0")
    assert order.status == OrderStatus.CANCELLED


@pytest.mark.parametrize("seed", range(20))
def test_cancelling_every_line_refunds_exactly_the_order_amount(seed):
    """Whatever the cancellation order, refunds add up to what was paid."""
    rng = random.Random(seed)
    totals = [str(rng.randint(1, 500_00) / 100) for _ in range(rng.randint(1, 6))]
    items_total = sum(D(t) for t in totals)
    shipping = "0" if items_total > 500 else "50"
    coupon = str(min(D(rng.randint(0, 200)), items_total))

    order = _order(totals, shipping=shipping, coupon=coupon)
    placed_amount = order.order_amount.amount

    ids = [line.line_id for line in order.lines]
    rng.shuffle(ids)
    refunded = D("0")
    for line_id in ids:
        outcome = order.cancel_line(line_id, "test")
        assert outcome.amount.amount >= 0
        refunded += outcome.amount.amount
        assert order.amount_is_consistent()
        assert order.order_amount.amount >= 0

    assert refunded == placed_amount
    assert order.order_amount.amount == D("0")
