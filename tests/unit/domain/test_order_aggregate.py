"""Tests for the Order aggregate lifecycle."""

from decimal import Decimal

import pytest

from storefront.domain.entities import DeliveryAddress, Order
from storefront.domain.enums import LineStatus, OrderStatus, PaymentMethod, PaymentStatus
from storefront.domain.events import (
    OrderLineCancelledEvent,
    OrderPlacedEvent,
    OrderStatusChangedEvent,
)
from storefront.domain.exceptions import NotEligible, NotFound, ValidationError
from storefront.domain.value_objects import Money

D = Decimal


def _place(method=PaymentMethod.WALLET, totals=("600", "400"), shipping="0", coupon="100") -> Order:
    lines = [
        Order.new_line(f"p{i}", f"Product {i}", 1, Money(D(t)), Money(D(t)))
        for i, t in enumerate(totals)
    ]
    return Order.place(
        user_id="u1",
        lines=lines,
        delivery_address=DeliveryAddress(
            name="Asha", line1="12 MG Road", city="Kochi", state="Kerala",
            pincode="682001", phone="9876543210",
        ),
        payment_method=method,
        shipping_charge=Money(D(shipping)),
        coupon_discount=Money(D(coupon)),
        coupon_code="SAVE10" if coupon != "0" else None,
    )


def _delivered(method=PaymentMethod.WALLET, **kwargs) -> Order:
    order = _place(method, **kwargs)
    if method == PaymentMethod.COD:
        order.confirm_cash_on_delivery()
    else:
        order.mark_paid()
    for status in (OrderStatus.SHIPPED, OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED):
        order.advance_status(status)
    return order


def test_place_computes_amount_and_records_event():
    order = _place()

    assert order.items_total == Money(D("1000"))
    assert order.order_amount == Money(D("900"))
    assert order.status == OrderStatus.PENDING
    assert order.amount_is_consistent()
    assert order.order_id.startswith("ORD-")
    assert isinstance(order.get_domain_events()[0], OrderPlacedEvent)


def test_place_without_lines_rejected():
    with pytest.raises(ValidationError):
        Order.place(
            user_id="u1",
            lines=[],
            delivery_address=DeliveryAddress(
                name="A", line1="L", city="C", state="S", pincode="1", phone="2"
            ),
            payment_method=PaymentMethod.COD,
            shipping_charge=Money(D("0")),
            coupon_discount=Money(D("0")),
        )


def test_line_cancel_refunds_proportionally():
    order = _place()
    order.mark_paid()
    second = order.lines[1]

    outcome = order.cancel_line(second.line_id, "Changed my mind")

    assert outcome.amount == Money(D("360"))
    assert order.order_amount == Money(D("540"))
    assert order.refunded_amount == Money(D("360"))
    assert second.status == LineStatus.CANCELLED
    assert order.status == OrderStatus.PROCESSING
    assert order.amount_is_consistent()
    assert any(isinstance(e, OrderLineCancelledEvent) for e in order.get_domain_events())


def test_cancelling_last_line_cancels_order():
    order = _place(totals=("250",), coupon="0", shipping="50")
    order.mark_paid()

    outcome = order.cancel_line(order.lines[0].line_id, "Not needed")

    assert outcome.amount == Money(D("300"))
    assert order.status == OrderStatus.CANCELLED
    assert order.order_amount == Money(D("0"))


def test_line_cancel_twice_not_eligible():
    order = _place()
    line_id = order.lines[0].line_id
    order.cancel_line(line_id, "once")
    with pytest.raises(NotEligible):
        order.cancel_line(line_id, "twice")


def test_unknown_line_not_found():
    with pytest.raises(NotFound):
        _place().cancel_line("missing", "x")


def test_full_cancel_refunds_remaining_amount():
    order = _place()
    order.mark_paid()
    order.cancel_line(order.lines[0].line_id, "first")

    outcome = order.cancel("Changed my mind")

    assert outcome.amount == Money(D("360"))
    assert [l.line_id for l in outcome.lines] == [order.lines[1].line_id]
    assert order.status == OrderStatus.CANCELLED
    assert order.order_amount == Money(D("0"))
    assert order.cancellation_reason == "Changed my mind"


def test_cancel_twice_not_eligible():
    order = _place()
    order.cancel("first")
    with pytest.raises(NotEligible):
        order.cancel("second")


def test_shipped_lines_cannot_be_cancelled_but_order_can():
    order = _place()
    order.mark_paid()
    order.advance_status(OrderStatus.SHIPPED)

    with pytest.raises(NotEligible):
        order.cancel_line(order.lines[0].line_id, "late")
    order.cancel("late")
    assert order.status == OrderStatus.CANCELLED


def test_delivered_order_cannot_be_cancelled():
    order = _delivered()
    with pytest.raises(NotEligible):
        order.cancel("too late")


def test_status_moves_forward_only():
    order = _place()
    order.mark_paid()
    order.advance_status(OrderStatus.SHIPPED)

    with pytest.raises(NotEligible):
        order.advance_status(OrderStatus.PROCESSING)
    with pytest.raises(NotEligible):
        order.advance_status(OrderStatus.SHIPPED)
    with pytest.raises(NotEligible):
        order.advance_status(OrderStatus.RETURNED)
    changes = [e for e in order.get_domain_events() if isinstance(e, OrderStatusChangedEvent)]
    assert [e.new_status for e in changes] == ["Processing", "Shipped"]


def test_unpaid_gateway_order_cannot_ship():
    order = _place(method=PaymentMethod.RAZORPAY)
    with pytest.raises(NotEligible):
        order.advance_status(OrderStatus.SHIPPED)


def test_cash_on_delivery_paid_on_delivery():
    order = _place(method=PaymentMethod.COD)
    order.confirm_cash_on_delivery()
    assert order.payment_status == PaymentStatus.PENDING

    for status in (OrderStatus.SHIPPED, OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED):
        order.advance_status(status)

    assert order.payment_status == PaymentStatus.PAID


def test_mark_paid_twice_not_eligible():
    order = _place(method=PaymentMethod.RAZORPAY)
    order.mark_paid("pay_1", "sig")
    with pytest.raises(NotEligible):
        order.mark_paid("pay_1", "sig")


def test_return_requires_delivery():
    order = _place()
    order.mark_paid()
    with pytest.raises(NotEligible):
        order.request_return(None, "Damaged")


def test_return_requires_reason():
    order = _delivered()
    with pytest.raises(ValidationError):
        order.request_return(None, "   ")


def test_whole_order_return_approved():
    order = _delivered()
    lines = order.request_return(None, "Damaged")
    assert order.status == OrderStatus.RETURN_REQUESTED
    assert order.order_amount == Money(D("900"))

    outcome = order.approve_return([l.line_id for l in lines])

    assert outcome.amount == Money(D("900"))
    assert order.status == OrderStatus.RETURNED
    assert all(l.status == LineStatus.RETURNED for l in order.lines)
    assert order.amount_is_consistent()


def test_partial_return_keeps_order_delivered():
    order = _delivered()
    line = order.lines[1]
    order.request_return([line.line_id], "Wrong colour")
    assert order.status == OrderStatus.DELIVERED
    assert line.status == LineStatus.RETURN_REQUESTED

    outcome = order.approve_return([line.line_id])

    assert outcome.amount == Money(D("360"))
    assert order.status == OrderStatus.DELIVERED
    assert order.order_amount == Money(D("540"))


def test_rejected_return_restores_lines():
    order = _delivered()
    order.request_return(None, "Damaged")

    order.reject_return([l.line_id for l in order.lines])

    assert order.status == OrderStatus.DELIVERED
    assert all(l.status == LineStatus.ORDERED for l in order.lines)
    assert order.order_amount == Money(D("900"))


def test_approve_twice_not_eligible():
    order = _delivered()
    line_id = order.lines[0].line_id
    order.request_return([line_id], "Damaged")
    order.approve_return([line_id])
    with pytest.raises(NotEligible):
        order.approve_return([line_id])
