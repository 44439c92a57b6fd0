"""
FastAPI Dependencies.

Provides dependency injection for services, adapters and caller identity.
"""
import logging
import secrets
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import async_sessionmaker

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from storefront.application.interfaces import INotificationService, IPaymentGateway
from storefront.application.services import (
    CartService,
    CheckoutService,
    CouponService,
    OrderService,
    ReportService,
    ReturnService,
    WalletService,
)
from storefront.domain.event_bus import EventBus
from storefront.domain.exceptions import Forbidden, Unauthorized
from storefront.infrastructure import event_bus as event_bus_module
from storefront.infrastructure.adapters.notifications import (
    MockNotificationService,
    WebhookNotificationService,
)
from storefront.infrastructure.adapters.payments import MockPaymentGateway, RazorpayGateway
from storefront.infrastructure.database import get_session_factory
from storefront.settings import AppSettings, get_app_settings

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_session_factory = None
_payment_gateway = None
_notification_service = None


def get_settings() -> AppSettings:
    return get_app_settings()


def get_db_session_factory() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = get_session_factory()
        logger.info("Created database session factory")
    return _session_factory


def get_event_bus() -> EventBus:
    return event_bus_module.get_event_bus()


def get_payment_gateway() -> IPaymentGateway:
    global _payment_gateway

    if _payment_gateway is None:
        settings = get_app_settings()
        if settings.razorpay.enabled:
            _payment_gateway = RazorpayGateway(settings.razorpay)
            logger.info("Using RazorpayGateway")
        else:
            _payment_gateway = MockPaymentGateway(key_id=settings.razorpay.key_id)
            logger.info("Using MockPaymentGateway (razorpay disabled)")

    return _payment_gateway


def get_notification_service() -> INotificationService:
    global _notification_service

    if _notification_service is None:
        settings = get_app_settings()
        if settings.notifications.enabled and settings.notifications.webhook_url:
            _notification_service = WebhookNotificationService(settings.notifications)
            logger.info("Created WebhookNotificationService instance")
        else:
            _notification_service = MockNotificationService()
            logger.info("Using MockNotificationService (notifications disabled)")

    return _notification_service


# =============================================================================
# SERVICES
# =============================================================================

def get_cart_service(
    session_factory=Depends(get_db_session_factory),
    settings: AppSettings = Depends(get_settings),
) -> CartService:
    return CartService(session_factory, settings.checkout)


def get_checkout_service(
    session_factory=Depends(get_db_session_factory),
    gateway: IPaymentGateway = Depends(get_payment_gateway),
    notifications: INotificationService = Depends(get_notification_service),
    event_bus: EventBus = Depends(get_event_bus),
    settings: AppSettings = Depends(get_settings),
) -> CheckoutService:
    return CheckoutService(
        session_factory,
        gateway,
        notifications,
        event_bus=event_bus,
        settings=settings.checkout,
        payment_settings=settings.razorpay,
    )


def get_order_service(
    session_factory=Depends(get_db_session_factory),
    event_bus: EventBus = Depends(get_event_bus),
    settings: AppSettings = Depends(get_settings),
) -> OrderService:
    return OrderService(session_factory, event_bus=event_bus, settings=settings.checkout)


def get_return_service(
    session_factory=Depends(get_db_session_factory),
    event_bus: EventBus = Depends(get_event_bus),
    settings: AppSettings = Depends(get_settings),
) -> ReturnService:
    return ReturnService(session_factory, event_bus=event_bus, settings=settings.checkout)


def get_wallet_service(session_factory=Depends(get_db_session_factory)) -> WalletService:
    return WalletService(session_factory)


def get_coupon_service(
    session_factory=Depends(get_db_session_factory),
    settings: AppSettings = Depends(get_settings),
) -> CouponService:
    return CouponService(session_factory, settings.checkout)


def get_report_service(session_factory=Depends(get_db_session_factory)) -> ReportService:
    return ReportService(session_factory)


# =============================================================================
# CALLER IDENTITY
# =============================================================================

def get_current_user(x_user_id: Optional[str] = Header(None)) -> str:
    if not x_user_id:
        raise Unauthorized("X-User-Id header is required")
    return x_user_id


def get_current_email(x_user_email: Optional[str] = Header(None)) -> Optional[str]:
    return x_user_email or None


def require_admin(
    x_admin_token: Optional[str] = Header(None),
    settings: AppSettings = Depends(get_settings),
) -> None:
    if not x_admin_token or not secrets.compare_digest(x_admin_token, settings.admin.token):
        raise Forbidden("Admin access required")


# =============================================================================
# RESET (for testing)
# =============================================================================

def reset_dependencies():
    global _session_factory, _payment_gateway, _notification_service

    _session_factory = None
    _payment_gateway = None
    _notification_service = None

    logger.info("Dependencies reset")
