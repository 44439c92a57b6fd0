"""API test client with the database and adapters overridden."""

import httpx
import pytest_asyncio

from storefront.settings import AdminSettings, AppSettings
from storefront_api import dependencies
from storefront_api.main import app

ADMIN_TOKEN = "admin-secret"


@pytest_asyncio.fixture
async def client(session_factory, gateway, notifications, event_bus, checkout_settings, payment_settings):
    settings = AppSettings()
    settings.checkout = checkout_settings
    settings.razorpay = payment_settings
    settings.admin = AdminSettings(token=ADMIN_TOKEN)

    app.dependency_overrides[dependencies.get_db_session_factory] = lambda: session_factory
    app.dependency_overrides[dependencies.get_payment_gateway] = lambda: gateway
    app.dependency_overrides[dependencies.get_notification_service] = lambda: notifications
    app.dependency_overrides[dependencies.get_event_bus] = lambda: event_bus
    app.dependency_overrides[dependencies.get_settings] = lambda: settings

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
