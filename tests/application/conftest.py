"""Service fixtures wired to the test database."""

import pytest
import pytest_asyncio

from storefront.application.services import (
    CartService,
    CheckoutService,
    CouponService,
    OrderService,
    ReportService,
    ReturnService,
    WalletService,
)


@pytest.fixture
def cart_service(session_factory, checkout_settings):
    return CartService(session_factory, checkout_settings)


@pytest.fixture
def checkout(session_factory, gateway, notifications, event_bus, checkout_settings, payment_settings):
    return CheckoutService(
        session_factory,
        gateway,
        notifications,
        event_bus=event_bus,
        settings=checkout_settings,
        payment_settings=payment_settings,
    )


@pytest.fixture
def orders(session_factory, event_bus, checkout_settings):
    return OrderService(session_factory, event_bus=event_bus, settings=checkout_settings)


@pytest.fixture
def returns(session_factory, event_bus, checkout_settings):
    return ReturnService(session_factory, event_bus=event_bus, settings=checkout_settings)


@pytest.fixture
def wallets(session_factory):
    return WalletService(session_factory)


@pytest.fixture
def coupons(session_factory, checkout_settings):
    return CouponService(session_factory, checkout_settings)


@pytest.fixture
def reports(session_factory):
    return ReportService(session_factory)


@pytest_asyncio.fixture
async def catalog(store):
    """Two products (600 and 400) and an address for user-1."""
    category = await store.category()
    laptop = await store.product(category, "600", stock=5, name="Laptop")
    mouse = await store.product(category, "400", stock=5, name="Mouse")
    address = await store.address("user-1")
    return {"category": category, "laptop": laptop, "mouse": mouse, "address": address}
