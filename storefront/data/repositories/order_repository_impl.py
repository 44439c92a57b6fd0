"""SQLAlchemy implementations of OrderRepository and ReturnRequestRepository."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domain.entities import Order, ReturnRequest
from storefront.domain.enums import OrderStatus, PaymentMethod, PaymentStatus
from storefront.domain.repositories import OrderRepository, ReturnRequestRepository

from ..mappers import OrderMapper, ReturnRequestMapper
from ..models import OrderModel, ReturnRequestModel

logger = logging.getLogger(__name__)


class SqlAlchemyOrderRepository(OrderRepository):
    """Concrete implementation of OrderRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session
        self.seen: List[Order] = []

    async def save(self, order: Order) -> None:
        """Persist order aggregate (upsert) without committing."""
        existing = await self._session.get(OrderModel, order.order_id)

        if existing:
            OrderMapper.update_persistence(order, existing)
        else:
            self._session.add(OrderMapper.to_persistence(order))

        await self._session.flush()
        self._track(order)

    async def get(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        stmt = select(OrderModel).where(OrderModel.order_id == order_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return OrderMapper.to_domain(model) if model else None

    async def get_by_remote_order_id(self, remote_order_id: str) -> Optional[Order]:
        result = await self._session.execute(
            select(OrderModel)
            .where(OrderModel.remote_order_id == remote_order_id)
            .with_for_update()
        )
        model = result.scalar_one_or_none()
        return OrderMapper.to_domain(model) if model else None

    async def list_for_user(self, user_id: str, offset: int = 0, limit: int = 20) -> List[Order]:
        result = await self._session.execute(
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return [OrderMapper.to_domain(m) for m in result.scalars().all()]

    async def list_all(
        self,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> List[Order]:
        stmt = select(OrderModel)
        if status:
            stmt = stmt.where(OrderModel.status == status)
        if payment_status:
            stmt = stmt.where(OrderModel.payment_status == payment_status)
        stmt = stmt.order_by(OrderModel.created_at.desc()).offset(offset).limit(limit)
        result = await self._session.execute(stmt)
        return [OrderMapper.to_domain(m) for m in result.scalars().all()]

    async def list_between(
        self, start: Optional[datetime], end: Optional[datetime]
    ) -> List[Order]:
        stmt = select(OrderModel)
        if start is not None:
            stmt = stmt.where(OrderModel.created_at >= start)
        if end is not None:
            stmt = stmt.where(OrderModel.created_at <= end)
        result = await self._session.execute(stmt.order_by(OrderModel.created_at))
        return [OrderMapper.to_domain(m) for m in result.scalars().all()]

    async def delete_stale_gateway_orders(self, user_id: str, older_than: datetime) -> int:
        result = await self._session.execute(
            select(OrderModel).where(
                OrderModel.user_id == user_id,
                OrderModel.payment_method == PaymentMethod.RAZORPAY.value,
                OrderModel.status == OrderStatus.PENDING.value,
                OrderModel.payment_status.in_(
                    [PaymentStatus.PENDING.value, PaymentStatus.FAILED.value]
                ),
                OrderModel.created_at < older_than,
            )
        )
        stale = result.scalars().all()
        for model in stale:
            await self._session.delete(model)
        if stale:
            await self._session.flush()
            logger.info(f"Deleted {len(stale)} stale gateway order(s) for user {user_id}")
        return len(stale)

    def _track(self, order: Order) -> None:
        # Identity, not equality: aggregates are unhashable dataclasses.
        if all(o is not order for o in self.seen):
            self.seen.append(order)


class SqlAlchemyReturnRequestRepository(ReturnRequestRepository):
    """Concrete implementation of ReturnRequestRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.seen: List[ReturnRequest] = []

    async def save(self, request: ReturnRequest) -> None:
        existing = await self._session.get(ReturnRequestModel, request.return_id)
        if existing:
            ReturnRequestMapper.update_persistence(request, existing)
        else:
            self._session.add(ReturnRequestMapper.to_persistence(request))
        await self._session.flush()
        if all(r is not request for r in self.seen):
            self.seen.append(request)

    async def get(self, return_id: str) -> Optional[ReturnRequest]:
        result = await self._session.execute(
            select(ReturnRequestModel)
            .where(ReturnRequestModel.return_id == return_id)
            .with_for_update()
        )
        model = result.scalar_one_or_none()
        return ReturnRequestMapper.to_domain(model) if model else None

    async def list(
        self,
        status: Optional[str] = None,
        user_id: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> List[ReturnRequest]:
        stmt = select(ReturnRequestModel)
        if status:
            stmt = stmt.where(ReturnRequestModel.status == status)
        if user_id:
            stmt = stmt.where(ReturnRequestModel.user_id == user_id)
        stmt = stmt.order_by(ReturnRequestModel.created_at.desc()).offset(offset).limit(limit)
        result = await self._session.execute(stmt)
        return [ReturnRequestMapper.to_domain(m) for m in result.scalars().all()]
