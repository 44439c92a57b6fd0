"""Cancellation, admin status changes and returns through the services."""

from decimal import Decimal

import pytest

from storefront.application.dtos.order_dto import PlaceOrderRequest
from storefront.domain.enums import OrderStatus, PaymentMethod
from storefront.domain.exceptions import NotEligible, NotFound

D = Decimal
USER = "user-1"

DELIVERY_PATH = (OrderStatus.SHIPPED, OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED)


async def place(cart_service, checkout, catalog, method, products=("laptop", "mouse")):
    for key in products:
        await cart_service.add_item(USER, catalog[key], 1)
    response = await checkout.place_order(
        USER, PlaceOrderRequest(address_id=catalog["address"], payment_method=method)
    )
    return response.order


async def deliver(orders, order_id):
    order = None
    for status in DELIVERY_PATH:
        order = await orders.update_status(order_id, status)
    return order


@pytest.mark.asyncio
async def test_cod_cancel_restores_stock_without_wallet_credit(
    store, catalog, cart_service, checkout, orders
):
    order = await place(cart_service, checkout, catalog, PaymentMethod.COD)
    assert await store.stock_of(catalog["laptop"]) == 4

    cancelled = await orders.cancel_order(order.order_id, "Changed my mind", user_id=USER)

    assert cancelled.status == "Cancelled"
    assert cancelled.order_amount == D("0")
    assert all(line.status == "Cancelled" for line in cancelled.items)
    assert await store.stock_of(catalog["laptop"]) == 5
    assert await store.stock_of(catalog["mouse"]) == 5
    assert await store.wallet_balance(USER) == D("0")


@pytest.mark.asyncio
async def test_double_cancel_credits_wallet_once(
    store, catalog, cart_service, checkout, orders, wallets
):
    await store.fund_wallet(USER, "2000")
    order = await place(cart_service, checkout, catalog, PaymentMethod.WALLET)
    assert await store.wallet_balance(USER) == D("1000.00")

    await orders.cancel_order(order.order_id, "first", user_id=USER)
    with pytest.raises(NotEligible):
        await orders.cancel_order(order.order_id, "second", user_id=USER)

    assert await store.wallet_balance(USER) == D("2000.00")
    ledger = await wallets.list_transactions(USER)
    assert ledger.total == 3
    assert [t.type for t in ledger.transactions] == ["credit", "debit", "credit"]
    assert (await wallets.reconcile(USER)).consistent


@pytest.mark.asyncio
async def test_orders_of_other_users_are_hidden(catalog, cart_service, checkout, orders):
    order = await place(cart_service, checkout, catalog, PaymentMethod.COD)

    with pytest.raises(NotFound):
        await orders.get_order(order.order_id, user_id="intruder")
    with pytest.raises(NotFound):
        await orders.cancel_order(order.order_id, "mine now", user_id="intruder")


@pytest.mark.asyncio
async def test_admin_cancel_refunds_paid_order(store, catalog, cart_service, checkout, orders):
    await store.fund_wallet(USER, "1000")
    order = await place(cart_service, checkout, catalog, PaymentMethod.WALLET, products=("mouse",))
    assert order.order_amount == D("450.00")

    cancelled = await orders.update_status(order.order_id, OrderStatus.CANCELLED)

    assert cancelled.status == "Cancelled"
    assert cancelled.cancellation_reason == "Cancelled by admin"
    assert await store.wallet_balance(USER) == D("1000.00")


@pytest.mark.asyncio
async def test_admin_status_only_moves_forward(catalog, cart_service, checkout, orders):
    order = await place(cart_service, checkout, catalog, PaymentMethod.COD)
    await orders.update_status(order.order_id, OrderStatus.SHIPPED)

    with pytest.raises(NotEligible):
        await orders.update_status(order.order_id, OrderStatus.PROCESSING)


@pytest.mark.asyncio
async def test_cod_delivery_then_whole_return_refunds_to_wallet(
    store, catalog, cart_service, checkout, orders, returns, event_bus
):
    order = await place(cart_service, checkout, catalog, PaymentMethod.COD)
    delivered = await deliver(orders, order.order_id)
    assert delivered.payment_status == "paid"

    request = await returns.request_return(USER, order.order_id, "Damaged in transit")
    assert request.whole_order
    assert len(request.items) == 2
    assert (await orders.get_order(order.order_id)).status == "Return Requested"
    assert await store.wallet_balance(USER) == D("0")

    approved = await returns.approve(request.return_id)

    assert approved.status == "Approved"
    assert approved.refunded_amount == D("1000.00")
    final = await orders.get_order(order.order_id)
    assert final.status == "Returned"
    assert final.order_amount == D("0")
    assert await store.wallet_balance(USER) == D("1000.00")
    assert await store.stock_of(catalog["laptop"]) == 5

    with pytest.raises(NotEligible):
        await returns.approve(request.return_id)
    assert await store.wallet_balance(USER) == D("1000.00")

    event_types = [e.event_type for e in event_bus.history]
    assert "ReturnRequestedEvent" in event_types
    assert "ReturnResolvedEvent" in event_types


@pytest.mark.asyncio
async def test_line_return_refunds_its_share(store, catalog, cart_service, checkout, orders, returns):
    await store.fund_wallet(USER, "1000")
    order = await place(cart_service, checkout, catalog, PaymentMethod.WALLET)
    await deliver(orders, order.order_id)
    mouse_line = next(l for l in order.items if l.product_id == catalog["mouse"])

    request = await returns.request_return(
        USER, order.order_id, "Wrong colour", line_id=mouse_line.line_id
    )
    assert not request.whole_order
    await returns.approve(request.return_id)

    final = await orders.get_order(order.order_id)
    assert final.status == "Delivered"
    assert final.order_amount == D("600.00")
    assert await store.wallet_balance(USER) == D("400.00")
    assert await store.stock_of(catalog["mouse"]) == 5
    assert await store.stock_of(catalog["laptop"]) == 4


@pytest.mark.asyncio
async def test_rejected_return_moves_no_money(store, catalog, cart_service, checkout, orders, returns):
    order = await place(cart_service, checkout, catalog, PaymentMethod.COD)
    await deliver(orders, order.order_id)

    request = await returns.request_return(USER, order.order_id, "Changed my mind")
    rejected = await returns.reject(request.return_id)

    assert rejected.status == "Rejected"
    final = await orders.get_order(order.order_id)
    assert final.status == "Delivered"
    assert final.order_amount == D("1000.00")
    assert await store.wallet_balance(USER) == D("0")

    with pytest.raises(NotEligible):
        await returns.reject(request.return_id)

    pending = await returns.list_returns(status="Pending")
    assert pending == []


@pytest.mark.asyncio
async def test_return_before_delivery_not_eligible(catalog, cart_service, checkout, returns):
    order = await place(cart_service, checkout, catalog, PaymentMethod.COD)
    with pytest.raises(NotEligible):
        await returns.request_return(USER, order.order_id, "Too slow")
