"""Application service for the return workflow."""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from storefront.application.dtos.order_dto import ReturnRequestDTO
from storefront.application.services.settlement import refund_to_wallet, restore_stock
from storefront.application.transaction import RetryPolicy, run_in_transaction
from storefront.data.uow import UnitOfWork, create_uow
from storefront.domain.entities import ReturnItem, ReturnRequest
from storefront.domain.event_bus import EventBus
from storefront.domain.exceptions import NotFound
from storefront.settings.sections.checkout import CheckoutSettings

logger = logging.getLogger(__name__)


class ReturnService:
    """
    Return requests: Pending -> Approved | Rejected.

    Requesting moves no money. Approval refunds proportionally, restores
    stock and credits the wallet in one transaction.
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

    async def request_return(
        self,
        user_id: str,
        order_id: str,
        reason: str,
        line_id: Optional[str] = None,
    ) -> ReturnRequestDTO:
        """Open a return for one line, or for the whole order when `line_id` is None."""

        async def work(uow: UnitOfWork) -> ReturnRequest:
            order = await uow.orders.get(order_id, for_update=True)
            if order is None or order.user_id != user_id:
                raise NotFound(f"Order {order_id} not found")

            lines = order.request_return(
                [line_id] if line_id is not None else None, reason
            )
            request = ReturnRequest.open(
                order_id=order.order_id,
                user_id=user_id,
                reason=reason,
                items=[
                    ReturnItem(line_id=l.line_id, product_id=l.product_id, quantity=l.quantity)
                    for l in lines
                ],
                whole_order=line_id is None,
            )
            await uow.orders.save(order)
            await uow.returns.save(request)
            logger.info(
                f"[{uow.execution_id}] Return {request.return_id} requested for "
                f"order {order_id} ({len(lines)} line(s))"
            )
            return request

        request = await run_in_transaction(
            self._session_factory,
            work,
            self._policy,
            event_bus=self._event_bus,
            operation="returns.request",
        )
        return ReturnRequestDTO.from_domain(request)

    async def approve(self, return_id: str) -> ReturnRequestDTO:

        async def work(uow: UnitOfWork) -> ReturnRequest:
            request = await self._load(uow, return_id)
            request.ensure_pending()

            order = await uow.orders.get(request.order_id, for_update=True)
            if order is None:
                raise NotFound(f"Order {request.order_id} not found")

            outcome = order.approve_return(request.line_ids)
            request.approve(outcome.amount)
            await refund_to_wallet(
                uow, order, outcome.amount, f"Refund for returned items of order {order.order_id}"
            )
            await restore_stock(uow, order, outcome.lines)
            await uow.orders.save(order)
            await uow.returns.save(request)
            logger.info(
                f"[{uow.execution_id}] Return {return_id} approved, refund {outcome.amount}"
            )
            return request

        request = await run_in_transaction(
            self._session_factory,
            work,
            self._policy,
            event_bus=self._event_bus,
            operation="returns.approve",
        )
        return ReturnRequestDTO.from_domain(request)

    async def reject(self, return_id: str) -> ReturnRequestDTO:

        async def work(uow: UnitOfWork) -> ReturnRequest:
            request = await self._load(uow, return_id)
            request.ensure_pending()

            order = await uow.orders.get(request.order_id, for_update=True)
            if order is None:
                raise NotFound(f"Order {request.order_id} not found")

            order.reject_return(request.line_ids)
            request.reject()
            await uow.orders.save(order)
            await uow.returns.save(request)
            logger.info(f"[{uow.execution_id}] Return {return_id} rejected")
            return request

        request = await run_in_transaction(
            self._session_factory,
            work,
            self._policy,
            event_bus=self._event_bus,
            operation="returns.reject",
        )
        return ReturnRequestDTO.from_domain(request)

    async def list_returns(
        self,
        status: Optional[str] = None,
        user_id: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> List[ReturnRequestDTO]:
        uow = create_uow(self._session_factory)
        async with uow:
            requests = await uow.returns.list(
                status=status, user_id=user_id, offset=(page - 1) * limit, limit=limit
            )
            return [ReturnRequestDTO.from_domain(r) for r in requests]

    @staticmethod
    async def _load(uow: UnitOfWork, return_id: str) -> ReturnRequest:
        request = await uow.returns.get(return_id)
        if request is None:
            raise NotFound(f"Return request {return_id} not found")
        return request
