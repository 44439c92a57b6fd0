# Settings package
from storefront.settings.app import AppSettings, get_app_settings
from storefront.settings.sections.admin import AdminSettings
from storefront.settings.sections.checkout import CheckoutSettings
from storefront.settings.sections.notifications import NotificationSettings
from storefront.settings.sections.payments import RazorpaySettings

__all__ = [
    "get_app_settings",
    "AppSettings",
    "AdminSettings",
    "CheckoutSettings",
    "NotificationSettings",
    "RazorpaySettings",
]
