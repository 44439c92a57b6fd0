"""
Settlement helpers shared by cancellation and return flows.

All functions run inside the caller's unit of work.
"""
import logging
from typing import Iterable, Optional

from storefront.data.uow import UnitOfWork
from storefront.domain.entities import Cart, Order, OrderLine
from storefront.domain.value_objects import Money

logger = logging.getLogger(__name__)


async def refund_to_wallet(
    uow: UnitOfWork, order: Order, amount: Money, description: str
) -> Optional[Money]:
    """
    Credit `amount` to the order owner's wallet.

    Only money actually collected is refunded: unpaid orders get no
    credit, their payable amount was already reduced on the order.
    """
    if not order.is_paid or not amount.is_positive():
        return None

    wallet = await uow.wallets.get_or_create(order.user_id)
    wallet.credit(amount, description)
    await uow.wallets.save(wallet)
    logger.info(
        f"[{uow.execution_id}] Refunded {amount} to wallet of {order.user_id} "
        f"for order {order.order_id}"
    )
    return amount


async def restore_stock(uow: UnitOfWork, order: Order, lines: Iterable[OrderLine]) -> None:
    """Put cancelled/returned units back, if the order ever took them."""
    if not order.stock_committed:
        return
    for line in lines:
        await uow.products.adjust_stock(line.product_id, line.quantity)


async def commit_stock(uow: UnitOfWork, cart: Cart, order: Order) -> None:
    """
    Turn the cart's reservations into the order's stock decrement.

    Cart reservations are released first, then every order line is
    taken with the conditional decrement; for an unchanged cart the net
    effect is zero.
    """
    for item in cart.items:
        await uow.products.adjust_stock(item.product_id, item.quantity)
    for line in order.lines:
        await uow.products.adjust_stock(line.product_id, -line.quantity)
    order.stock_committed = True
