"""Shared fixtures: file-backed SQLite database, settings and catalog seeding."""

from datetime import timedelta
from decimal import Decimal
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy import select

from storefront.data.models import (
    AddressModel,
    CategoryModel,
    CouponModel,
    OfferModel,
    ProductModel,
)
from storefront.data.uow import create_uow
from storefront.domain.value_objects import Money, new_id, utcnow
from storefront.infrastructure.adapters.notifications import MockNotificationService
from storefront.infrastructure.adapters.payments import MockPaymentGateway
from storefront.infrastructure.database.config import (
    DatabaseSettings,
    create_engine,
    init_database,
    make_session_factory,
)
from storefront.infrastructure.event_bus import InMemoryEventBus
from storefront.settings import CheckoutSettings, RazorpaySettings

# A file database: an in-memory one shares a single connection and cannot
# isolate concurrent transactions.
TEST_DATABASE_FILE = "storefront_test.db"

USER = "user-1"
OTHER_USER = "user-2"


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    engine = create_engine(
        DatabaseSettings(database_url=f"sqlite+aiosqlite:///{tmp_path / TEST_DATABASE_FILE}")
    )
    await init_database(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    yield make_session_factory(test_engine)


@pytest.fixture
def checkout_settings() -> CheckoutSettings:
    return CheckoutSettings(
        currency="INR",
        shipping_fee=Decimal("50"),
        free_shipping_above=Decimal("500"),
        cod_max_amount=Decimal("4000"),
        max_quantity_per_item=10,
        transaction_attempts=3,
        retry_backoff_seconds=0,
    )


@pytest.fixture
def payment_settings() -> RazorpaySettings:
    return RazorpaySettings(enabled=False, key_id="rzp_test_key", key_secret="test_secret")


@pytest.fixture
def gateway() -> MockPaymentGateway:
    return MockPaymentGateway(key_id="rzp_test_key")


@pytest.fixture
def notifications() -> MockNotificationService:
    return MockNotificationService()


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


class Store:
    """Seeds catalog rows and reads back stock and wallet state."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def _add(self, model) -> None:
        async with self.session_factory() as session:
            session.add(model)
            await session.commit()

    async def category(self, name: str = "Laptops") -> str:
        category_id = new_id()
        await self._add(CategoryModel(category_id=category_id, name=name, is_listed=True))
        return category_id

    async def product(
        self,
        category_id: str,
        price: str,
        stock: int = 10,
        name: str = "Product",
        product_offer: str = "0",
        is_listed: bool = True,
    ) -> str:
        product_id = new_id()
        await self._add(
            ProductModel(
                product_id=product_id,
                name=name,
                category_id=category_id,
                price=Decimal(price),
                currency="INR",
                product_offer=Decimal(product_offer),
                stock=stock,
                is_listed=is_listed,
                is_deleted=False,
            )
        )
        return product_id

    async def offer(
        self,
        category_id: str,
        discount_type: str,
        value: str,
        max_discount: Optional[str] = None,
        is_active: bool = True,
    ) -> str:
        offer_id = new_id()
        now = utcnow()
        await self._add(
            OfferModel(
                offer_id=offer_id,
                name=f"{value} off",
                discount_type=discount_type,
                discount_value=Decimal(value),
                max_discount=Decimal(max_discount) if max_discount else None,
                category_ids=[category_id],
                start_date=now - timedelta(days=1),
                end_date=now + timedelta(days=1),
                is_active=is_active,
            )
        )
        return offer_id

    async def address(self, user_id: str = USER) -> str:
        address_id = new_id()
        await self._add(
            AddressModel(
                address_id=address_id,
                user_id=user_id,
                name="Asha Menon",
                line1="12 MG Road",
                city="Kochi",
                state="Kerala",
                pincode="682001",
                phone="9876543210",
            )
        )
        return address_id

    async def coupon(
        self,
        code: str = "SAVE10",
        discount_type: str = "percentage",
        value: str = "10",
        minimum_price: str = "0",
        max_discount: Optional[str] = None,
        usage_limit: Optional[int] = None,
        usage_per_user_limit: int = 1,
        expires_in_days: int = 30,
        is_active: bool = True,
    ) -> str:
        await self._add(
            CouponModel(
                code=code,
                name=f"Coupon {code}",
                discount_type=discount_type,
                discount_value=Decimal(value),
                max_discount=Decimal(max_discount) if max_discount else None,
                minimum_price=Decimal(minimum_price),
                expires_at=utcnow() + timedelta(days=expires_in_days),
                is_active=is_active,
                usage_limit=usage_limit,
                usage_per_user_limit=usage_per_user_limit,
                coupon_used=0,
                user_usage={},
            )
        )
        return code

    async def fund_wallet(self, user_id: str, amount: str) -> None:
        uow = create_uow(self.session_factory)
        async with uow:
            wallet = await uow.wallets.get_or_create(user_id)
            wallet.credit(Money(Decimal(amount)), "Top-up")
            await uow.wallets.save(wallet)
            await uow.commit()

    async def stock_of(self, product_id: str) -> int:
        async with self.session_factory() as session:
            return await session.scalar(
                select(ProductModel.stock).where(ProductModel.product_id == product_id)
            )

    async def wallet_balance(self, user_id: str) -> Decimal:
        uow = create_uow(self.session_factory)
        async with uow:
            wallet = await uow.wallets.get_or_create(user_id)
            return wallet.balance.amount

    async def coupon_row(self, code: str) -> CouponModel:
        async with self.session_factory() as session:
            return await session.get(CouponModel, code)


@pytest_asyncio.fixture
async def store(session_factory) -> Store:
    return Store(session_factory)
