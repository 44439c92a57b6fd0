"""Read-only admin reports."""

from collections import Counter
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from storefront.application.dtos.report_dto import SalesSummaryDTO
from storefront.data.uow import create_uow
from storefront.domain.enums import OrderStatus
from storefront.domain.value_objects import DEFAULT_CURRENCY, as_naive_utc, quantize


class ReportService:

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def sales_summary(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> SalesSummaryDTO:
        """Totals over orders created between start and end; cancelled orders add no gross."""
        start, end = as_naive_utc(start), as_naive_utc(end)
        uow = create_uow(self._session_factory)
        async with uow:
            orders = await uow.orders.list_between(start, end)

        gross = Decimal("0")
        coupons = Decimal("0")
        refunded = Decimal("0")
        by_status: Counter = Counter()
        by_method: Counter = Counter()
        currency = DEFAULT_CURRENCY

        for order in orders:
            currency = order.currency
            by_status[order.status.value] += 1
            by_method[order.payment_method.value] += 1
            refunded += order.refunded_amount.amount
            if order.status == OrderStatus.CANCELLED:
                continue
            gross += order.order_amount.amount
            coupons += order.coupon_discount.amount

        return SalesSummaryDTO(
            start=start,
            end=end,
            order_count=len(orders),
            gross_amount=quantize(gross),
            coupon_discount_total=quantize(coupons),
            refunded_total=quantize(refunded),
            by_status=dict(by_status),
            by_payment_method=dict(by_method),
            currency=currency,
        )
