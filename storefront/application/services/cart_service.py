"""Application service for cart operations."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from storefront.application.dtos.cart_dto import CartDTO, PriceQuoteDTO
from storefront.application.transaction import RetryPolicy, run_in_transaction
from storefront.data.uow import UnitOfWork, create_uow
from storefront.domain.exceptions import NotFound
from storefront.domain.services.pricing import best_price, shipping_charge_for
from storefront.domain.value_objects import utcnow
from storefront.settings.sections.checkout import CheckoutSettings

logger = logging.getLogger(__name__)


class CartService:
    """
    Cart use cases.

    Adding units reserves stock with a conditional decrement; removing
    or decreasing releases it, in the same transaction as the cart write.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: Optional[CheckoutSettings] = None,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings or CheckoutSettings()
        self._policy = RetryPolicy(
            max_attempts=self._settings.transaction_attempts,
            backoff_seconds=self._settings.retry_backoff_seconds,
        )

    def _to_dto(self, cart) -> CartDTO:
        shipping = shipping_charge_for(
            cart.subtotal, self._settings.shipping_fee, self._settings.free_shipping_above
        )
        return CartDTO.from_domain(cart, shipping)

    async def get_cart(self, user_id: str) -> CartDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            cart = await uow.carts.get(user_id)
            return self._to_dto(cart)

    async def quote_price(self, product_id: str) -> PriceQuoteDTO:
        """Best price for a product right now."""
        uow = create_uow(self._session_factory)
        async with uow:
            product = await uow.products.get(product_id)
            if product is None or not product.is_available:
                raise NotFound(f"Product {product_id} not found")
            now = utcnow()
            quote = best_price(product, await uow.offers.list_active(now), now)
            return PriceQuoteDTO(
                product_id=product_id,
                original_price=quote.original_price.amount,
                final_price=quote.final_price.amount,
                discount_amount=quote.discount_amount.amount,
                discount_percentage=quote.discount_percentage,
                applied_offer_type=quote.applied_offer_type,
            )

    async def add_item(self, user_id: str, product_id: str, quantity: int = 1) -> CartDTO:
        async def work(uow: UnitOfWork) -> CartDTO:
            product = await uow.products.get(product_id)
            if product is None or not product.is_available:
                raise NotFound(f"Product {product_id} not found")

            now = utcnow()
            quote = best_price(product, await uow.offers.list_active(now), now)

            cart = await uow.carts.get(user_id)
            reserved = cart.add(
                product_id,
                quantity,
                quote.final_price,
                self._settings.max_quantity_per_item,
                product_name=product.name,
            )
            await uow.products.adjust_stock(product_id, -reserved)
            await uow.carts.save(cart)
            logger.info(f"[{uow.execution_id}] {user_id} added {reserved} x {product_id} to cart")
            return self._to_dto(cart)

        return await run_in_transaction(
            self._session_factory, work, self._policy, operation="cart.add_item"
        )

    async def update_quantity(self, user_id: str, product_id: str, delta: int) -> CartDTO:
        async def work(uow: UnitOfWork) -> CartDTO:
            cart = await uow.carts.get(user_id)
            applied = cart.change_quantity(
                product_id, delta, self._settings.max_quantity_per_item
            )
            await uow.products.adjust_stock(product_id, -applied)
            await uow.carts.save(cart)
            return self._to_dto(cart)

        return await run_in_transaction(
            self._session_factory, work, self._policy, operation="cart.update_quantity"
        )

    async def remove_item(self, user_id: str, product_id: str) -> CartDTO:
        async def work(uow: UnitOfWork) -> CartDTO:
            cart = await uow.carts.get(user_id)
            released = cart.remove(product_id)
            await uow.products.adjust_stock(product_id, released)
            await uow.carts.save(cart)
            return self._to_dto(cart)

        return await run_in_transaction(
            self._session_factory, work, self._policy, operation="cart.remove_item"
        )
