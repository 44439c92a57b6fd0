"""HTTP tests for the storefront API."""

from decimal import Decimal

import pytest
import pytest_asyncio

from storefront.domain.services.payment_signature import expected_signature

D = Decimal
USER = "user-1"
CUSTOMER = {"X-User-Id": USER, "X-User-Email": "asha@example.com"}
ADMIN = {"X-Admin-Token": "admin-secret"}


@pytest_asyncio.fixture
async def shop(store):
    category = await store.category()
    return {
        "laptop": await store.product(category, "600", stock=5, name="Laptop"),
        "mouse": await store.product(category, "400", stock=5, name="Mouse"),
        "address": await store.address(USER),
    }


async def add_to_cart(client, product_id, quantity=1):
    response = await client.post(
        "/api/v1/cart/items",
        json={"product_id": product_id, "quantity": quantity},
        headers=CUSTOMER,
    )
    assert response.status_code == 201, response.text
    return response.json()


async def place(client, address_id, method="cod", coupon_code=None):
    payload = {"address_id": address_id, "payment_method": method}
    if coupon_code:
        payload["coupon_code"] = coupon_code
    return await client.post("/api/v1/checkout/orders", json=payload, headers=CUSTOMER)


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

    ready = await client.get("/health/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["database"] == "ok"


@pytest.mark.asyncio
async def test_customer_routes_require_identity(client):
    response = await client.get("/api/v1/cart")

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": "Unauthorized",
        "message": "X-User-Id header is required",
    }


@pytest.mark.asyncio
async def test_invalid_body_reported_as_validation_error(client, shop):
    response = await client.post(
        "/api/v1/cart/items",
        json={"product_id": shop["mouse"], "quantity": 0},
        headers=CUSTOMER,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "ValidationError"


@pytest.mark.asyncio
async def test_cart_checkout_and_cancellation(client, store, shop):
    await store.coupon("SAVE10", "percentage", "10")
    await store.fund_wallet(USER, "1000")
    await add_to_cart(client, shop["laptop"])
    cart = await add_to_cart(client, shop["mouse"])
    assert D(cart["total"]) == D("1000")

    preview = await client.post(
        "/api/v1/checkout/coupon/preview", json={"code": "SAVE10"}, headers=CUSTOMER
    )
    assert preview.status_code == 200
    assert D(preview.json()["total"]) == D("900")

    response = await place(client, shop["address"], "wallet", "SAVE10")
    assert response.status_code == 201, response.text
    order = response.json()["order"]
    assert D(order["order_amount"]) == D("900")

    mouse_line = next(l for l in order["items"] if l["product_id"] == shop["mouse"])
    cancel_url = f"/api/v1/orders/{order['order_id']}/lines/{mouse_line['line_id']}/cancel"
    cancelled = await client.post(cancel_url, json={"reason": "Not needed"}, headers=CUSTOMER)
    assert cancelled.status_code == 200
    assert D(cancelled.json()["order_amount"]) == D("540")

    again = await client.post(cancel_url, headers=CUSTOMER)
    assert again.status_code == 409
    assert again.json()["error"] == "NotEligible"

    wallet = await client.get("/api/v1/wallet", headers=CUSTOMER)
    assert D(wallet.json()["balance"]) == D("460")

    history = await client.get("/api/v1/wallet/transactions", headers=CUSTOMER)
    assert history.json()["total"] == 3

    listing = await client.get("/api/v1/orders", headers=CUSTOMER)
    assert [o["order_id"] for o in listing.json()["orders"]] == [order["order_id"]]


@pytest.mark.asyncio
async def test_wallet_shortfall_is_payment_required(client, store, shop):
    await store.fund_wallet(USER, "200")
    await add_to_cart(client, shop["mouse"])

    response = await place(client, shop["address"], "wallet")

    assert response.status_code == 402
    assert response.json()["error"] == "InsufficientFunds"


@pytest.mark.asyncio
async def test_unknown_coupon_is_bad_request(client, shop):
    await add_to_cart(client, shop["mouse"])
    response = await place(client, shop["address"], "cod", "NOPE")

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidCoupon"


@pytest.mark.asyncio
async def test_out_of_stock_is_conflict(client, shop):
    response = await client.post(
        "/api/v1/cart/items",
        json={"product_id": shop["mouse"], "quantity": 6},
        headers=CUSTOMER,
    )
    assert response.status_code == 409
    assert response.json()["error"] == "InsufficientStock"


@pytest.mark.asyncio
async def test_unknown_order_not_found(client):
    response = await client.get("/api/v1/orders/ORD-MISSING", headers=CUSTOMER)
    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"


@pytest.mark.asyncio
async def test_gateway_payment_verification(client, shop, payment_settings):
    await add_to_cart(client, shop["laptop"])
    response = await place(client, shop["address"], "razorpay")
    gateway = response.json()["gateway"]

    bad = await client.post(
        "/api/v1/checkout/payments/verify",
        json={
            "remote_order_id": gateway["remote_order_id"],
            "remote_payment_id": "pay_1",
            "signature": "forged",
        },
        headers=CUSTOMER,
    )
    assert bad.status_code == 400
    assert bad.json()["error"] == "PaymentVerificationFailed"

    non_ascii = await client.post(
        "/api/v1/checkout/payments/verify",
        json={
            "remote_order_id": gateway["remote_order_id"],
            "remote_payment_id": "pay_1",
            "signature": "é" * 64,
        },
        headers=CUSTOMER,
    )
    assert non_ascii.status_code == 400
    assert non_ascii.json()["error"] == "PaymentVerificationFailed"

    signature =expected_signature(payment_settings.key_secret, gateway["remote_order_id"], "pay_1")
    good = await client.post(
        "/api/v1/checkout/payments/verify",
        json={
            "remote_order_id": gateway["remote_order_id"],
            "remote_payment_id": "pay_1",
            "signature": signature,
        },
        headers=CUSTOMER,
    )
    assert good.status_code == 200
    assert good.json()["payment_status"] == "paid"


@pytest.mark.asyncio
async def test_admin_routes_require_token(client):
    response = await client.get("/api/v1/admin/orders", headers={"X-Admin-Token": "wrong"})
    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden"


@pytest.mark.asyncio
async def test_admin_delivers_and_approves_return(client, store, shop):
    await add_to_cart(client, shop["mouse"])
    order = (await place(client, shop["address"], "cod")).json()["order"]
    order_id = order["order_id"]

    for status in ("Shipped", "Out for Delivery", "Delivered"):
        response = await client.patch(
            f"/api/v1/admin/orders/{order_id}/status", json={"status": status}, headers=ADMIN
        )
        assert response.status_code == 200, response.text
    assert response.json()["payment_status"] == "paid"

    backwards = await client.patch(
        f"/api/v1/admin/orders/{order_id}/status", json={"status": "Shipped"}, headers=ADMIN
    )
    assert backwards.status_code == 409

    created = await client.post(
        f"/api/v1/orders/{order_id}/returns", json={"reason": "Damaged"}, headers=CUSTOMER
    )
    assert created.status_code == 201
    return_id = created.json()["return_id"]

    pending = await client.get("/api/v1/admin/returns", params={"status": "Pending"}, headers=ADMIN)
    assert [r["return_id"] for r in pending.json()] == [return_id]

    approved = await client.post(f"/api/v1/admin/returns/{return_id}/approve", headers=ADMIN)
    assert approved.status_code == 200
    assert D(approved.json()["refunded_amount"]) == D("450")

    twice = await client.post(f"/api/v1/admin/returns/{return_id}/approve", headers=ADMIN)
    assert twice.status_code == 409

    reconcile = await client.get(f"/api/v1/admin/wallets/{USER}/reconcile", headers=ADMIN)
    assert reconcile.json()["consistent"] is True
    assert D(reconcile.json()["balance"]) == D("450")

    report = await client.get("/api/v1/admin/reports/sales", headers=ADMIN)
    assert report.status_code == 200
    assert report.json()["by_status"] == {"Returned": 1}


@pytest.mark.asyncio
async def test_admin_creates_and_lists_coupons(client):
    response = await client.post(
        "/api/v1/admin/coupons",
        json={
            "code": "welcome50",
            "name": "Welcome",
            "discount_type": "flat",
            "discount_value": "50",
            "expires_at": "2099-01-01T00:00:00Z",
        },
        headers=ADMIN,
    )
    assert response.status_code == 201, response.text
    assert response.json()["code"] == "WELCOME50"

    listing = await client.get("/api/v1/admin/coupons", headers=ADMIN)
    assert [c["code"] for c in listing.json()] == ["WELCOME50"]

    invalid = await client.post(
        "/api/v1/admin/coupons",
        json={
            "name": "Too much",
            "discount_type": "percentage",
            "discount_value": "150",
            "expires_at": "2099-01-01T00:00:00Z",
        },
        headers=ADMIN,
    )
    assert invalid.status_code == 400
