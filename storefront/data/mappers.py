"""Static mappers for domain entities ↔ database models."""

from decimal import Decimal
from typing import Optional

from storefront.domain.entities import (
    Address,
    Cart,
    CartItem,
    Coupon,
    DeliveryAddress,
    Offer,
    Order,
    OrderLine,
    Product,
    ReturnItem,
    ReturnRequest,
    Wallet,
    WalletTransaction,
)
from storefront.domain.enums import (
    LineStatus,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ReturnStatus,
    TransactionType,
)
from storefront.domain.value_objects import Money, discount_rule_from, utcnow

from .models import (
    AddressModel,
    CartItemModel,
    CouponModel,
    OfferModel,
    OrderLineModel,
    OrderModel,
    ProductModel,
    ReturnRequestModel,
    WalletModel,
    WalletTransactionModel,
)


def _money(value, currency: str) -> Money:
    return Money(amount=Decimal(str(value if value is not None else 0)), currency=currency)


def _decimal(value) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


class OrderLineMapper:
    """Static mapper for OrderLine ↔ OrderLineModel transformation."""

    @staticmethod
    def to_domain(model: OrderLineModel, currency: str) -> OrderLine:
        return OrderLine(
            line_id=model.line_id,
            product_id=model.product_id,
            product_name=model.product_name,
            quantity=model.quantity,
            price=_money(model.price, currency),
            final_price=_money(model.final_price, currency),
            total_price=_money(model.total_price, currency),
            status=LineStatus(model.status),
        )

    @staticmethod
    def to_persistence(entity: OrderLine, position: int) -> OrderLineModel:
        return OrderLineModel(
            line_id=entity.line_id,
            position=position,
            product_id=entity.product_id,
            product_name=entity.product_name,
            quantity=entity.quantity,
            price=entity.price.amount,
            final_price=entity.final_price.amount,
            total_price=entity.total_price.amount,
            status=entity.status.value,
        )


class OrderMapper:
    """Static mapper for Order ↔ OrderModel transformation."""

    @staticmethod
    def to_domain(model: OrderModel) -> Order:
        """Convert ORM model to domain aggregate.

        Args:
            model: OrderModel instance (lines eagerly loaded)

        Returns:
            Order domain aggregate
        """
        currency = model.currency
        return Order(
            order_id=model.order_id,
            user_id=model.user_id,
            lines=[OrderLineMapper.to_domain(line, currency) for line in model.lines],
            delivery_address=DeliveryAddress.from_dict(model.delivery_address or {}),
            payment_method=PaymentMethod(model.payment_method),
            shipping_charge=_money(model.shipping_charge, currency),
            coupon_discount=_money(model.coupon_discount, currency),
            order_amount=_money(model.order_amount, currency),
            status=OrderStatus(model.status),
            payment_status=PaymentStatus(model.payment_status),
            coupon_code=model.coupon_code,
            refunded_amount=_money(model.refunded_amount, currency),
            stock_committed=bool(model.stock_committed),
            remote_order_id=model.remote_order_id,
            remote_payment_id=model.remote_payment_id,
            payment_signature=model.payment_signature,
            cancellation_reason=model.cancellation_reason,
            cancelled_at=model.cancelled_at,
            return_reason=model.return_reason,
            return_requested_at=model.return_requested_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_persistence(entity: Order) -> OrderModel:
        model = OrderModel(
            order_id=entity.order_id,
            user_id=entity.user_id,
            currency=entity.currency,
            created_at=entity.created_at,
            lines=[
                OrderLineMapper.to_persistence(line, position)
                for position, line in enumerate(entity.lines)
            ],
        )
        OrderMapper.update_persistence(entity, model)
        return model

    @staticmethod
    def update_persistence(entity: Order, model: OrderModel) -> None:
        """Copy mutable state onto an already-loaded model.

        `updated_at` is always refreshed so every save issues an UPDATE
        of the order row and bumps its version, even when only line
        statuses changed.
        """
        model.status = entity.status.value
        model.payment_method = entity.payment_method.value
        model.payment_status = entity.payment_status.value
        model.order_amount = entity.order_amount.amount
        model.shipping_charge = entity.shipping_charge.amount
        model.coupon_code = entity.coupon_code
        model.coupon_discount = entity.coupon_discount.amount
        model.refunded_amount = entity.refunded_amount.amount
        model.stock_committed = entity.stock_committed
        model.delivery_address = entity.delivery_address.to_dict()
        model.remote_order_id = entity.remote_order_id
        model.remote_payment_id = entity.remote_payment_id
        model.payment_signature = entity.payment_signature
        model.cancellation_reason = entity.cancellation_reason
        model.cancelled_at = entity.cancelled_at
        model.return_reason = entity.return_reason
        model.return_requested_at = entity.return_requested_at
        model.updated_at = utcnow()

        by_id = {line.line_id: line for line in model.lines}
        for line in entity.lines:
            line_model = by_id.get(line.line_id)
            if line_model is not None:
                line_model.status = line.status.value


class ReturnRequestMapper:

    @staticmethod
    def to_domain(model: ReturnRequestModel) -> ReturnRequest:
        refunded = (
            _money(model.refunded_amount, model.currency)
            if model.refunded_amount is not None
            else None
        )
        return ReturnRequest(
            return_id=model.return_id,
            order_id=model.order_id,
            user_id=model.user_id,
            reason=model.reason,
            items=[
                ReturnItem(
                    line_id=item["line_id"],
                    product_id=item["product_id"],
                    quantity=int(item["quantity"]),
                )
                for item in model.items or []
            ],
            whole_order=bool(model.whole_order),
            status=ReturnStatus(model.status),
            refunded_amount=refunded,
            created_at=model.created_at,
            resolved_at=model.resolved_at,
        )

    @staticmethod
    def to_persistence(entity: ReturnRequest) -> ReturnRequestModel:
        model = ReturnRequestModel(
            return_id=entity.return_id,
            order_id=entity.order_id,
            user_id=entity.user_id,
            reason=entity.reason,
            items=[
                {"line_id": i.line_id, "product_id": i.product_id, "quantity": i.quantity}
                for i in entity.items
            ],
            whole_order=entity.whole_order,
            created_at=entity.created_at,
        )
        ReturnRequestMapper.update_persistence(entity, model)
        return model

    @staticmethod
    def update_persistence(entity: ReturnRequest, model: ReturnRequestModel) -> None:
        model.status = entity.status.value
        model.resolved_at = entity.resolved_at
        if entity.refunded_amount is not None:
            model.refunded_amount = entity.refunded_amount.amount
            model.currency = entity.refunded_amount.currency


class ProductMapper:

    @staticmethod
    def to_domain(model: ProductModel) -> Product:
        return Product(
            product_id=model.product_id,
            name=model.name,
            category_id=model.category_id,
            price=_money(model.price, model.currency),
            stock=model.stock,
            product_offer=_decimal(model.product_offer) or Decimal("0"),
            is_listed=bool(model.is_listed),
            is_deleted=bool(model.is_deleted),
        )


class OfferMapper:

    @staticmethod
    def to_domain(model: OfferModel) -> Offer:
        return Offer(
            offer_id=model.offer_id,
            name=model.name,
            rule=discount_rule_from(
                model.discount_type,
                _decimal(model.discount_value),
                _decimal(model.max_discount),
            ),
            category_ids=list(model.category_ids or []),
            start_date=model.start_date,
            end_date=model.end_date,
            is_active=bool(model.is_active),
        )


class AddressMapper:

    @staticmethod
    def to_domain(model: AddressModel) -> Address:
        return Address(
            address_id=model.address_id,
            user_id=model.user_id,
            name=model.name,
            line1=model.line1,
            line2=model.line2 or "",
            landmark=model.landmark or "",
            city=model.city,
            state=model.state,
            pincode=model.pincode,
            phone=model.phone,
        )


class CartMapper:

    @staticmethod
    def to_domain(user_id: str, models: list) -> Cart:
        cart = Cart(user_id=user_id)
        for model in models:
            cart.items.append(
                CartItem(
                    product_id=model.product_id,
                    quantity=model.quantity,
                    price=_money(model.price, model.currency),
                    product_name=model.product_name,
                )
            )
        if models:
            cart.currency = models[0].currency
        return cart

    @staticmethod
    def to_persistence(user_id: str, item: CartItem) -> CartItemModel:
        return CartItemModel(
            user_id=user_id,
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            price=item.price.amount,
            currency=item.price.currency,
        )


class CouponMapper:

    @staticmethod
    def to_domain(model: CouponModel) -> Coupon:
        return Coupon(
            code=model.code,
            name=model.name,
            rule=discount_rule_from(
                model.discount_type,
                _decimal(model.discount_value),
                _decimal(model.max_discount),
            ),
            minimum_price=_decimal(model.minimum_price) or Decimal("0"),
            expires_at=model.expires_at,
            is_active=bool(model.is_active),
            usage_limit=model.usage_limit,
            usage_per_user_limit=model.usage_per_user_limit,
            coupon_used=model.coupon_used,
            user_usage=dict(model.user_usage or {}),
            created_at=model.created_at,
        )

    @staticmethod
    def to_persistence(entity: Coupon) -> CouponModel:
        model = CouponModel(code=entity.code)
        CouponMapper.update_persistence(entity, model)
        return model

    @staticmethod
    def update_persistence(entity: Coupon, model: CouponModel) -> None:
        model.name = entity.name
        model.discount_type = entity.rule.kind
        model.discount_value = entity.rule.value
        model.max_discount = entity.rule.max_discount
        model.minimum_price = entity.minimum_price
        model.expires_at = entity.expires_at
        model.is_active = entity.is_active
        model.usage_limit = entity.usage_limit
        model.usage_per_user_limit = entity.usage_per_user_limit
        model.coupon_used = entity.coupon_used
        # New dict so the JSON column is flagged as changed.
        model.user_usage = dict(entity.user_usage)


class WalletMapper:

    @staticmethod
    def to_domain(model: WalletModel) -> Wallet:
        return Wallet(
            user_id=model.user_id,
            balance=_money(model.balance, model.currency),
            updated_at=model.updated_at,
        )

    @staticmethod
    def transaction_to_domain(model: WalletTransactionModel) -> WalletTransaction:
        return WalletTransaction(
            transaction_id=model.transaction_id,
            amount=_money(model.amount, model.currency),
            type=TransactionType(model.type),
            description=model.description,
            occurred_at=model.occurred_at,
        )

    @staticmethod
    def transaction_to_persistence(
        user_id: str, entity: WalletTransaction, seq: int
    ) -> WalletTransactionModel:
        return WalletTransactionModel(
            transaction_id=entity.transaction_id,
            user_id=user_id,
            amount=entity.amount.amount,
            currency=entity.amount.currency,
            type=entity.type.value,
            description=entity.description,
            occurred_at=entity.occurred_at,
            seq=seq,
        )
