"""SQLAlchemy implementations of the catalog, cart, coupon and wallet repositories."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domain.entities import (
    Address,
    Cart,
    Coupon,
    Offer,
    Product,
    Wallet,
    WalletTransaction,
)
from storefront.domain.exceptions import InsufficientStock, NotFound
from storefront.domain.repositories import (
    AddressRepository,
    CartRepository,
    CouponRepository,
    OfferRepository,
    ProductRepository,
    WalletRepository,
)
from storefront.domain.value_objects import DEFAULT_CURRENCY, utcnow

from ..mappers import (
    AddressMapper,
    CartMapper,
    CouponMapper,
    OfferMapper,
    ProductMapper,
    WalletMapper,
)
from ..models import (
    AddressModel,
    CartItemModel,
    CouponModel,
    OfferModel,
    ProductModel,
    WalletModel,
    WalletTransactionModel,
)

logger = logging.getLogger(__name__)

_CONFLICT_IGNORING_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class SqlAlchemyProductRepository(ProductRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, product_id: str) -> Optional[Product]:
        result = await self._session.execute(
            select(ProductModel)
            .where(ProductModel.product_id == product_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return ProductMapper.to_domain(model) if model else None

    async def adjust_stock(self, product_id: str, delta: int) -> None:
        """Conditional UPDATE; zero affected rows means not enough stock."""
        if delta == 0:
            return

        stmt = (
            update(ProductModel)
            .where(ProductModel.product_id == product_id)
            .values(stock=ProductModel.stock + delta)
            .execution_options(synchronize_session=False)
        )
        if delta < 0:
            stmt = stmt.where(ProductModel.stock >= -delta)

        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            exists = await self._session.scalar(
                select(func.count()).select_from(ProductModel).where(
                    ProductModel.product_id == product_id
                )
            )
            if not exists:
                raise NotFound(f"Product {product_id} not found")
            raise InsufficientStock(
                f"Not enough stock for product {product_id} (requested {-delta})",
                details={"product_id": product_id, "requested": -delta},
            )
        logger.debug(f"Stock of {product_id} adjusted by {delta:+d}")


class SqlAlchemyOfferRepository(OfferRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_active(self, now: datetime) -> List[Offer]:
        result = await self._session.execute(
            select(OfferModel).where(
                OfferModel.is_active.is_(True),
                or_(OfferModel.start_date.is_(None), OfferModel.start_date <= now),
                or_(OfferModel.end_date.is_(None), OfferModel.end_date >= now),
            )
        )
        return [OfferMapper.to_domain(m) for m in result.scalars().all()]


class SqlAlchemyAddressRepository(AddressRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_user(self, address_id: str, user_id: str) -> Optional[Address]:
        result = await self._session.execute(
            select(AddressModel).where(
                AddressModel.address_id == address_id,
                AddressModel.user_id == user_id,
            )
        )
        model = result.scalar_one_or_none()
        return AddressMapper.to_domain(model) if model else None


class SqlAlchemyCartRepository(CartRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _rows(self, user_id: str) -> List[CartItemModel]:
        result = await self._session.execute(
            select(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.id)
        )
        return list(result.scalars().all())

    async def get(self, user_id: str) -> Cart:
        return CartMapper.to_domain(user_id, await self._rows(user_id))

    async def save(self, cart: Cart) -> None:
        """Sync rows with the cart: update, insert new, delete removed."""
        existing = {row.product_id: row for row in await self._rows(cart.user_id)}

        for item in cart.items:
            row = existing.pop(item.product_id, None)
            if row is None:
                self._session.add(CartMapper.to_persistence(cart.user_id, item))
            else:
                row.quantity = item.quantity
                row.price = item.price.amount
                row.product_name = item.product_name

        for row in existing.values():
            await self._session.delete(row)

        await self._session.flush()

    async def delete(self, user_id: str) -> None:
        for row in await self._rows(user_id):
            await self._session.delete(row)
        await self._session.flush()


class SqlAlchemyCouponRepository(CouponRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_code(self, code: str) -> Optional[Coupon]:
        result = await self._session.execute(
            select(CouponModel).where(CouponModel.code == code).with_for_update()
        )
        model = result.scalar_one_or_none()
        return CouponMapper.to_domain(model) if model else None

    async def list(self, active_only: bool = False) -> List[Coupon]:
        stmt = select(CouponModel)
        if active_only:
            stmt = stmt.where(CouponModel.is_active.is_(True))
        result = await self._session.execute(stmt.order_by(CouponModel.created_at.desc()))
        return [CouponMapper.to_domain(m) for m in result.scalars().all()]

    async def save(self, coupon: Coupon) -> None:
        existing = await self._session.get(CouponModel, coupon.code)
        if existing:
            CouponMapper.update_persistence(coupon, existing)
        else:
            self._session.add(CouponMapper.to_persistence(coupon))
        await self._session.flush()


class SqlAlchemyWalletRepository(WalletRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_or_create(self, user_id: str) -> Wallet:
        """
        Lock the user's wallet row, creating it first if missing.

        The insert ignores conflicts, so two first-time writers both end
        up locking the one row instead of the loser failing on the key.
        """
        insert = _CONFLICT_IGNORING_INSERTS[self._session.get_bind().dialect.name]
        created = await self._session.execute(
            insert(WalletModel)
            .values(
                user_id=user_id,
                balance=0,
                currency=DEFAULT_CURRENCY,
                updated_at=utcnow(),
                version=1,
            )
            .on_conflict_do_nothing(index_elements=[WalletModel.user_id])
        )
        if created.rowcount:
            logger.info(f"Created wallet for user {user_id}")

        result = await self._session.execute(
            select(WalletModel)
            .where(WalletModel.user_id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return WalletMapper.to_domain(result.scalar_one())

    async def save(self, wallet: Wallet) -> None:
        model = await self._session.get(WalletModel, wallet.user_id)
        if model is None:
            model = WalletModel(user_id=wallet.user_id)
            self._session.add(model)

        model.balance = wallet.balance.amount
        model.currency = wallet.balance.currency
        model.updated_at = wallet.updated_at or utcnow()

        if wallet.new_transactions:
            last_seq = await self._session.scalar(
                select(func.coalesce(func.max(WalletTransactionModel.seq), 0)).where(
                    WalletTransactionModel.user_id == wallet.user_id
                )
            )
            for offset, txn in enumerate(wallet.new_transactions, start=1):
                self._session.add(
                    WalletMapper.transaction_to_persistence(
                        wallet.user_id, txn, seq=(last_seq or 0) + offset
                    )
                )
            wallet.new_transactions.clear()

        await self._session.flush()

    async def list_transactions(
        self, user_id: str, offset: int = 0, limit: Optional[int] = 20
    ) -> List[WalletTransaction]:
        stmt = (
            select(WalletTransactionModel)
            .where(WalletTransactionModel.user_id == user_id)
            .order_by(WalletTransactionModel.seq.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [WalletMapper.transaction_to_domain(m) for m in result.scalars().all()]

    async def count_transactions(self, user_id: str) -> int:
        count = await self._session.scalar(
            select(func.count()).select_from(WalletTransactionModel).where(
                WalletTransactionModel.user_id == user_id
            )
        )
        return int(count or 0)
