"""Application service for order lifecycle operations."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from storefront.application.dtos.order_dto import OrderDTO, OrderListDTO
from storefront.application.services.settlement import refund_to_wallet, restore_stock
from storefront.application.transaction import RetryPolicy, run_in_transaction
from storefront.data.uow import UnitOfWork, create_uow
from storefront.domain.entities import Order
from storefront.domain.enums import OrderStatus
from storefront.domain.event_bus import EventBus
from storefront.domain.exceptions import NotFound
from storefront.settings.sections.checkout import CheckoutSettings

logger = logging.getLogger(__name__)

ADMIN_CANCEL_REASON = "Cancelled by admin"


class OrderService:
    """
    Order lifecycle use cases.

    Every mutation runs in one transaction: order, wallet credit and
    stock restoration commit together or not at all.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        event_bus: Optional[EventBus] = None,
        settings: Optional[CheckoutSettings] = None,
    ) -> None:
        self._session_factory = session_factory
        self._event_bus = event_bus
        settings = settings or CheckoutSettings()
        self._policy = RetryPolicy(
            max_attempts=settings.transaction_attempts,
            backoff_seconds=settings.retry_backoff_seconds,
        )

    async def _run(self, work, operation: str):
        return await run_in_transaction(
            self._session_factory,
            work,
            self._policy,
            event_bus=self._event_bus,
            operation=operation,
        )

    @staticmethod
    async def _load(uow: UnitOfWork, order_id: str, user_id: Optional[str]) -> Order:
        """Load for update; a foreign order looks exactly like a missing one."""
        order = await uow.orders.get(order_id, for_update=True)
        if order is None or (user_id is not None and order.user_id != user_id):
            raise NotFound(f"Order {order_id} not found")
        return order

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def get_order(self, order_id: str, user_id: Optional[str] = None) -> OrderDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id)
            if order is None or (user_id is not None and order.user_id != user_id):
                raise NotFound(f"Order {order_id} not found")
            return OrderDTO.from_domain(order)

    async def list_orders(self, user_id: str, page: int = 1, limit: int = 20) -> OrderListDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            orders = await uow.orders.list_for_user(user_id, offset=(page - 1) * limit, limit=limit)
            return OrderListDTO(
                orders=[OrderDTO.from_domain(o) for o in orders], page=page, limit=limit
            )

    async def list_all_orders(
        self,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> OrderListDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            orders = await uow.orders.list_all(
                status=status,
                payment_status=payment_status,
                offset=(page - 1) * limit,
                limit=limit,
            )
            return OrderListDTO(
                orders=[OrderDTO.from_domain(o) for o in orders], page=page, limit=limit
            )

    # =========================================================================
    # CANCELLATION
    # =========================================================================

    async def cancel_order(
        self, order_id: str, reason: str, user_id: Optional[str] = None
    ) -> OrderDTO:
        """
        Cancel the whole order.

        Paid orders get the remaining amount back in the wallet; stock of
        every still-ordered line is restored.
        """

        async def work(uow: UnitOfWork) -> Order:
            order = await self._load(uow, order_id, user_id)
            await self._cancel(uow, order, reason)
            return order

        order = await self._run(work, "orders.cancel_order")
        return OrderDTO.from_domain(order)

    async def _cancel(self, uow: UnitOfWork, order: Order, reason: str) -> None:
        outcome = order.cancel(reason)
        await refund_to_wallet(
            uow, order, outcome.amount, f"Refund for cancelled order {order.order_id}"
        )
        await restore_stock(uow, order, outcome.lines)
        await uow.orders.save(order)
        logger.info(
            f"[{uow.execution_id}] Order {order.order_id} cancelled, "
            f"refund {outcome.amount}"
        )

    async def cancel_line(
        self,
        order_id: str,
        line_id: str,
        reason: str,
        user_id: Optional[str] = None,
    ) -> OrderDTO:
        """Cancel one line with a proportional refund."""

        async def work(uow: UnitOfWork) -> Order:
            order = await self._load(uow, order_id, user_id)
            outcome = order.cancel_line(line_id, reason)
            line = outcome.lines[0]
            await refund_to_wallet(
                uow,
                order,
                outcome.amount,
                f"Refund for cancelled item {line.product_name} in order {order.order_id}",
            )
            await restore_stock(uow, order, outcome.lines)
            await uow.orders.save(order)
            logger.info(
                f"[{uow.execution_id}] Line {line_id} of {order.order_id} cancelled, "
                f"refund {outcome.amount}"
            )
            return order

        order = await self._run(work, "orders.cancel_line")
        return OrderDTO.from_domain(order)

    # =========================================================================
    # ADMIN STATUS
    # =========================================================================

    async def update_status(self, order_id: str, new_status: OrderStatus) -> OrderDTO:
        """
        Admin status change: forward moves only, or cancellation with a
        full settlement.
        """

        async def work(uow: UnitOfWork) -> Order:
            order = await self._load(uow, order_id, None)
            if new_status == OrderStatus.CANCELLED:
                await self._cancel(uow, order, ADMIN_CANCEL_REASON)
            else:
                order.advance_status(new_status)
                await uow.orders.save(order)
                logger.info(
                    f"[{uow.execution_id}] Order {order.order_id} moved to {new_status.value}"
                )
            return order

        order = await self._run(work, "orders.update_status")
        return OrderDTO.from_domain(order)
