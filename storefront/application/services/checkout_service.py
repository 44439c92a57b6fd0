"""Application service for checkout and payment operations."""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import async_sessionmaker

from storefront.application.dtos.coupon_dto import (
    AvailableCouponDTO,
    AvailableCouponListDTO,
    CouponDTO,
    CouponPreviewDTO,
)
from storefront.application.dtos.order_dto import (
    GatewayCheckoutDTO,
    OrderDTO,
    PlaceOrderRequest,
    PlaceOrderResponse,
)
from storefront.application.interfaces import INotificationService, IPaymentGateway, RemoteOrder
from storefront.application.services.settlement import commit_stock
from storefront.application.transaction import RetryPolicy, run_in_transaction
from storefront.data.uow import UnitOfWork, create_uow
from storefront.domain.entities import Cart, Coupon, DeliveryAddress, Order
from storefront.domain.enums import PaymentMethod
from storefront.domain.event_bus import EventBus
from storefront.domain.exceptions import (
    InvalidCoupon,
    NotEligible,
    NotFound,
    PaymentVerificationFailed,
    ValidationError,
)
from storefront.domain.services.coupon_codes import normalize_coupon_code
from storefront.domain.services.payment_signature import verify_signature
from storefront.domain.services.pricing import shipping_charge_for
from storefront.domain.value_objects import Money, utcnow
from storefront.settings.sections.checkout import CheckoutSettings
from storefront.settings.sections.payments import RazorpaySettings

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Checkout use cases: order placement, payment verification and the
    coupon helpers shown on the checkout page.

    Responsibilities:
    - Price the cart (subtotal, shipping, coupon)
    - Dispatch on payment method (cod, wallet, razorpay)
    - Commit stock and destroy the cart once the order is confirmed
    - Send the confirmation after commit
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        gateway: IPaymentGateway,
        notifications: INotificationService,
        event_bus: Optional[EventBus] = None,
        settings: Optional[CheckoutSettings] = None,
        payment_settings: Optional[RazorpaySettings] = None,
    ) -> None:
        self._session_factory = session_factory
        self._gateway = gateway
        self._notifications = notifications
        self._event_bus = event_bus
        self._settings = settings or CheckoutSettings()
        self._payment_settings = payment_settings or RazorpaySettings()
        self._policy = RetryPolicy(
            max_attempts=self._settings.transaction_attempts,
            backoff_seconds=self._settings.retry_backoff_seconds,
        )

    # =========================================================================
    # PRICING HELPERS
    # =========================================================================

    def _shipping(self, subtotal: Money) -> Money:
        return shipping_charge_for(
            subtotal, self._settings.shipping_fee, self._settings.free_shipping_above
        )

    async def _load_coupon(self, uow: UnitOfWork, code: str) -> Coupon:
        coupon = await uow.coupons.get_by_code(normalize_coupon_code(code))
        if coupon is None:
            raise InvalidCoupon(f"Coupon {code} does not exist")
        return coupon

    async def _price_cart(
        self, uow: UnitOfWork, user_id: str, cart: Cart, coupon_code: Optional[str]
    ) -> Tuple[Money, Money, Money, Optional[Coupon]]:
        """Return (subtotal, shipping, discount, coupon) for the cart."""
        subtotal = cart.subtotal
        shipping = self._shipping(subtotal)
        discount = Money.zero(subtotal.currency)
        coupon = None

        if coupon_code:
            coupon = await self._load_coupon(uow, coupon_code)
            coupon.validate(user_id, subtotal, utcnow())
            discount = coupon.discount_for(subtotal)

        return subtotal, shipping, discount, coupon

    # =========================================================================
    # COUPONS AT CHECKOUT
    # =========================================================================

    async def preview_coupon(self, user_id: str, code: str) -> CouponPreviewDTO:
        """Validate a coupon against the current cart without using it."""
        uow = create_uow(self._session_factory)
        async with uow:
            cart = await uow.carts.get(user_id)
            if cart.is_empty:
                raise ValidationError("Cart is empty")
            subtotal, shipping, discount, coupon = await self._price_cart(
                uow, user_id, cart, code
            )
            return CouponPreviewDTO(
                code=coupon.code,
                subtotal=subtotal.amount,
                shipping_charge=shipping.amount,
                discount=discount.amount,
                total=(subtotal + shipping - discount).amount,
            )

    async def available_coupons(self, user_id: str) -> AvailableCouponListDTO:
        """Active, unexpired coupons the user has not exhausted."""
        uow = create_uow(self._session_factory)
        async with uow:
            cart = await uow.carts.get(user_id)
            subtotal = cart.subtotal
            now = utcnow()
            result: List[AvailableCouponDTO] = []
            for coupon in await uow.coupons.list(active_only=True):
                if coupon.is_expired(now):
                    continue
                if coupon.usage_by(user_id) >= coupon.usage_per_user_limit:
                    continue
                if coupon.usage_limit is not None and coupon.coupon_used >= coupon.usage_limit:
                    continue
                eligible = subtotal.amount >= coupon.minimum_price and not cart.is_empty
                result.append(
                    AvailableCouponDTO(
                        coupon=CouponDTO.from_domain(coupon),
                        eligible=eligible,
                        discount=coupon.discount_for(subtotal).amount if eligible else Decimal("0"),
                    )
                )
            return AvailableCouponListDTO(coupons=result)

    # =========================================================================
    # PLACE ORDER
    # =========================================================================

    async def place_order(
        self, user_id: str, request: PlaceOrderRequest, email: Optional[str] = None
    ) -> PlaceOrderResponse:
        """
        Place an order from the user's cart.

        cod / wallet orders are confirmed immediately; razorpay orders
        stay Pending until the payment signature is verified.

        Raises:
            ValidationError: empty cart
            NotFound: unknown address
            InvalidCoupon: coupon not applicable
            NotEligible: COD above the ceiling
            InsufficientFunds: wallet balance below the total
            InsufficientStock: stock changed since items were carted
        """
        method = request.payment_method

        async def work(uow: UnitOfWork) -> Tuple[Order, Optional[RemoteOrder]]:
            cart = await uow.carts.get(user_id)
            if cart.is_empty:
                raise ValidationError("Cart is empty")

            address = await uow.addresses.get_for_user(request.address_id, user_id)
            if address is None:
                raise NotFound(f"Address {request.address_id} not found")

            subtotal, shipping, discount, coupon = await self._price_cart(
                uow, user_id, cart, request.coupon_code
            )
            total = subtotal + shipping - discount

            if method == PaymentMethod.COD and total.amount > self._settings.cod_max_amount:
                raise NotEligible(
                    f"Cash on delivery is not available for orders above "
                    f"{self._settings.cod_max_amount}"
                )

            lines = [
                Order.new_line(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    price=item.price,
                    final_price=item.price,
                )
                for item in cart.items
            ]
            order = Order.place(
                user_id=user_id,
                lines=lines,
                delivery_address=DeliveryAddress(
                    name=address.name,
                    line1=address.line1,
                    line2=address.line2,
                    landmark=address.landmark,
                    city=address.city,
                    state=address.state,
                    pincode=address.pincode,
                    phone=address.phone,
                ),
                payment_method=method,
                shipping_charge=shipping,
                coupon_discount=discount,
                coupon_code=coupon.code if coupon else None,
            )

            if coupon is not None:
                coupon.record_usage(user_id)
                await uow.coupons.save(coupon)

            remote = None
            if method == PaymentMethod.RAZORPAY:
                cutoff = utcnow() - timedelta(hours=self._settings.pending_order_ttl_hours)
                await uow.orders.delete_stale_gateway_orders(user_id, cutoff)
                remote = await self._gateway.create_remote_order(
                    amount_minor=order.order_amount.minor_units(),
                    currency=order.currency,
                    receipt=f"receipt_{order.order_id}",
                )
                order.attach_remote_order(remote.remote_order_id)
            else:
                if method == PaymentMethod.WALLET:
                    if order.order_amount.is_positive():
                        wallet = await uow.wallets.get_or_create(user_id)
                        wallet.debit(order.order_amount, f"Payment for order {order.order_id}")
                        await uow.wallets.save(wallet)
                    order.mark_paid()
                else:
                    order.confirm_cash_on_delivery()
                await commit_stock(uow, cart, order)
                await uow.carts.delete(user_id)

            await uow.orders.save(order)
            logger.info(
                f"[{uow.execution_id}] Order {order.order_id} placed by {user_id} "
                f"({method.value}, {order.order_amount})"
            )
            return order, remote

        order, remote = await run_in_transaction(
            self._session_factory,
            work,
            self._policy,
            event_bus=self._event_bus,
            operation="checkout.place_order",
        )

        if method != PaymentMethod.RAZORPAY:
            await self._send_confirmation(order, email)

        gateway = None
        if remote is not None:
            gateway = GatewayCheckoutDTO(
                remote_order_id=remote.remote_order_id,
                amount_minor=remote.amount_minor,
                currency=remote.currency,
                receipt=remote.receipt,
                key_id=self._gateway.key_id,
            )
        return PlaceOrderResponse(order=OrderDTO.from_domain(order), gateway=gateway)

    # =========================================================================
    # GATEWAY PAYMENT
    # =========================================================================

    async def verify_payment(
        self,
        user_id: str,
        remote_order_id: str,
        remote_payment_id: str,
        signature: str,
        email: Optional[str] = None,
    ) -> OrderDTO:
        """
        Confirm a gateway payment.

        The signature is checked before any transaction starts; on a
        mismatch nothing is touched.
        """
        if not verify_signature(
            self._payment_settings.key_secret, remote_order_id, remote_payment_id, signature
        ):
            logger.warning(f"Payment signature mismatch for remote order {remote_order_id}")
            raise PaymentVerificationFailed("Payment signature verification failed")

        async def work(uow: UnitOfWork) -> Order:
            order = await uow.orders.get_by_remote_order_id(remote_order_id)
            if order is None or order.user_id != user_id:
                raise NotFound(f"No order for payment {remote_order_id}")

            order.mark_paid(remote_payment_id=remote_payment_id, signature=signature)
            cart = await uow.carts.get(user_id)
            await commit_stock(uow, cart, order)
            await uow.carts.delete(user_id)
            await uow.orders.save(order)
            logger.info(f"[{uow.execution_id}] Payment verified for order {order.order_id}")
            return order

        order = await run_in_transaction(
            self._session_factory,
            work,
            self._policy,
            event_bus=self._event_bus,
            operation="checkout.verify_payment",
        )
        await self._send_confirmation(order, email)
        return OrderDTO.from_domain(order)

    async def mark_payment_failed(self, user_id: str, remote_order_id: str) -> OrderDTO:
        """Record a dismissed or failed gateway checkout."""

        async def work(uow: UnitOfWork) -> Order:
            order = await uow.orders.get_by_remote_order_id(remote_order_id)
            if order is None or order.user_id != user_id:
                raise NotFound(f"No order for payment {remote_order_id}")
            order.mark_payment_failed()
            await uow.orders.save(order)
            return order

        order = await run_in_transaction(
            self._session_factory, work, self._policy, operation="checkout.payment_failed"
        )
        logger.info(f"Payment for order {order.order_id} marked failed")
        return OrderDTO.from_domain(order)

    async def retry_payment(self, user_id: str, order_id: str) -> PlaceOrderResponse:
        """Open a fresh gateway order for an unpaid online order."""

        async def work(uow: UnitOfWork) -> Tuple[Order, RemoteOrder]:
            order = await uow.orders.get(order_id, for_update=True)
            if order is None or order.user_id != user_id:
                raise NotFound(f"Order {order_id} not found")
            if order.payment_method != PaymentMethod.RAZORPAY:
                raise NotEligible(f"Order {order_id} was not paid online")
            if order.is_paid:
                raise NotEligible(f"Order {order_id} is already paid")

            remote = await self._gateway.create_remote_order(
                amount_minor=order.order_amount.minor_units(),
                currency=order.currency,
                receipt=f"receipt_{order.order_id}",
            )
            order.reopen_payment(remote.remote_order_id)
            await uow.orders.save(order)
            return order, remote

        order, remote = await run_in_transaction(
            self._session_factory, work, self._policy, operation="checkout.retry_payment"
        )
        return PlaceOrderResponse(
            order=OrderDTO.from_domain(order),
            gateway=GatewayCheckoutDTO(
                remote_order_id=remote.remote_order_id,
                amount_minor=remote.amount_minor,
                currency=remote.currency,
                receipt=remote.receipt,
                key_id=self._gateway.key_id,
            ),
        )

    # =========================================================================
    # NOTIFICATION
    # =========================================================================

    async def _send_confirmation(self, order: Order, email: Optional[str]) -> None:
        """Best-effort; the order is already committed."""
        if not email:
            return
        summary = OrderDTO.from_domain(order).model_dump(mode="json")
        try:
            await self._notifications.send_order_confirmation(email, summary)
        except Exception as e:
            logger.error(
                f"Order confirmation for {order.order_id} failed: {e}", exc_info=True
            )
