# storefront/settings/app.py
from functools import lru_cache

from storefront.infrastructure.database.config import DatabaseSettings
from storefront.settings.sections.admin import AdminSettings
from storefront.settings.sections.checkout import CheckoutSettings
from storefront.settings.sections.notifications import NotificationSettings
from storefront.settings.sections.payments import RazorpaySettings


class AppSettings:
    """
    Central application settings aggregator.
    Settings are loaded lazily inside __init__
    to prevent eager evaluation at import time.
    """

    def __init__(self):
        self.database = DatabaseSettings()
        self.checkout = CheckoutSettings()
        self.razorpay = RazorpaySettings()
        self.notifications = NotificationSettings()
        self.admin = AdminSettings()


@lru_cache()
def get_app_settings() -> AppSettings:
    """Return cached global settings for the entire app."""
    return AppSettings()
