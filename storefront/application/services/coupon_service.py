"""Admin coupon management."""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from storefront.application.dtos.coupon_dto import CouponDTO, CreateCouponRequest
from storefront.application.transaction import RetryPolicy, run_in_transaction
from storefront.data.uow import UnitOfWork, create_uow
from storefront.domain.entities import Coupon
from storefront.domain.exceptions import ValidationError
from storefront.domain.services.coupon_codes import generate_coupon_code, normalize_coupon_code
from storefront.domain.value_objects import as_naive_utc, discount_rule_from, utcnow
from storefront.settings.sections.checkout import CheckoutSettings

logger = logging.getLogger(__name__)

# Attempts at drawing an unused generated code before giving up
CODE_GENERATION_ATTEMPTS = 5


class CouponService:

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: Optional[CheckoutSettings] = None,
    ) -> None:
        self._session_factory = session_factory
        settings = settings or CheckoutSettings()
        self._policy = RetryPolicy(
            max_attempts=settings.transaction_attempts,
            backoff_seconds=settings.retry_backoff_seconds,
        )

    async def create_coupon(self, request: CreateCouponRequest) -> CouponDTO:
        """
        Create a coupon. Codes are stored upper-case; a random one is drawn
        when the request carries none.
        """
        try:
            rule = discount_rule_from(
                request.discount_type, request.discount_value, request.max_discount
            )
        except ValueError as e:
            raise ValidationError(str(e)) from e

        expires_at = as_naive_utc(request.expires_at)
        if expires_at <= utcnow():
            raise ValidationError("Coupon expiry must be in the future")

        async def work(uow: UnitOfWork) -> Coupon:
            code = await self._pick_code(uow, request)
            coupon = Coupon(
                code=code,
                name=request.name,
                rule=rule,
                minimum_price=request.minimum_price,
                expires_at=expires_at,
                usage_limit=request.usage_limit,
                usage_per_user_limit=request.usage_per_user_limit,
                created_at=utcnow(),
            )
            await uow.coupons.save(coupon)
            logger.info(f"[{uow.execution_id}] Coupon {code} created ({rule.kind} {rule.value})")
            return coupon

        coupon = await run_in_transaction(
            self._session_factory, work, self._policy, operation="coupons.create"
        )
        return CouponDTO.from_domain(coupon)

    @staticmethod
    async def _pick_code(uow: UnitOfWork, request: CreateCouponRequest) -> str:
        if request.code:
            code = normalize_coupon_code(request.code)
            if await uow.coupons.get_by_code(code) is not None:
                raise ValidationError(f"Coupon code {code} already exists")
            return code

        for _ in range(CODE_GENERATION_ATTEMPTS):
            code = generate_coupon_code(request.code_length)
            if await uow.coupons.get_by_code(code) is None:
                return code
        raise ValidationError("Could not generate a unique coupon code")

    async def list_coupons(self, active_only: bool = False) -> List[CouponDTO]:
        uow = create_uow(self._session_factory)
        async with uow:
            coupons = await uow.coupons.list(active_only=active_only)
            return [CouponDTO.from_domain(c) for c in coupons]
