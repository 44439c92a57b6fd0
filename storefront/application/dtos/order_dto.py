"""Application DTOs for checkout, order and return operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.domain.entities import Order, OrderLine, ReturnRequest
from storefront.domain.enums import OrderStatus, PaymentMethod


class OrderLineDTO(BaseModel):
    """DTO for order line."""

    line_id: str = Field(..., description="Stable line identifier")
    product_id: str = Field(..., description="Product identifier")
    product_name: str = Field(..., description="Product name at purchase")
    quantity: int = Field(..., gt=0, description="Quantity ordered")
    price: Decimal = Field(..., ge=0, description="Unit list price at purchase")
    final_price: Decimal = Field(..., ge=0, description="Unit price after offers")
    total_price: Decimal = Field(..., ge=0, description="final_price x quantity")
    status: str = Field(..., description="Line status")

    model_config = {"frozen": True}

    @classmethod
    def from_domain(cls, line: OrderLine) -> "OrderLineDTO":
        return cls(
            line_id=line.line_id,
            product_id=line.product_id,
            product_name=line.product_name,
            quantity=line.quantity,
            price=line.price.amount,
            final_price=line.final_price.amount,
            total_price=line.total_price.amount,
            status=line.status.value,
        )


class DeliveryAddressDTO(BaseModel):
    name: str
    line1: str
    line2: str = ""
    landmark: str = ""
    city: str
    state: str
    pincode: str
    phone: str

    model_config = {"frozen": True}


class OrderDTO(BaseModel):
    """Response DTO for order details."""

    order_id: str = Field(..., description="Order reference")
    user_id: str = Field(..., description="Owning user")
    status: str = Field(..., description="Order status")
    payment_method: str = Field(..., description="cod | wallet | razorpay")
    payment_status: str = Field(..., description="pending | paid | failed")
    items: List[OrderLineDTO] = Field(default_factory=list, description="Order lines")
    delivery_address: DeliveryAddressDTO
    items_total: Decimal = Field(..., description="Sum of line totals as placed")
    shipping_charge: Decimal = Field(..., ge=0)
    coupon_code: Optional[str] = None
    coupon_discount: Decimal = Field(..., ge=0)
    refunded_amount: Decimal = Field(..., ge=0, description="Removed by cancellations/returns")
    order_amount: Decimal = Field(..., ge=0, description="Amount currently payable")
    currency: str = Field(default="INR")
    remote_order_id: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    return_reason: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @classmethod
    def from_domain(cls, order: Order) -> "OrderDTO":
        return cls(
            order_id=order.order_id,
            user_id=order.user_id,
            status=order.status.value,
            payment_method=order.payment_method.value,
            payment_status=order.payment_status.value,
            items=[OrderLineDTO.from_domain(line) for line in order.lines],
            delivery_address=DeliveryAddressDTO(**order.delivery_address.to_dict()),
            items_total=order.items_total.amount,
            shipping_charge=order.shipping_charge.amount,
            coupon_code=order.coupon_code,
            coupon_discount=order.coupon_discount.amount,
            refunded_amount=order.refunded_amount.amount,
            order_amount=order.order_amount.amount,
            currency=order.currency,
            remote_order_id=order.remote_order_id,
            cancellation_reason=order.cancellation_reason,
            cancelled_at=order.cancelled_at,
            return_reason=order.return_reason,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListDTO(BaseModel):
    """DTO for listing orders."""

    orders: List[OrderDTO] = Field(default_factory=list)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)

    model_config = {"frozen": True}


class PlaceOrderRequest(BaseModel):
    """Checkout request."""

    address_id: str = Field(..., min_length=1, description="Address book entry")
    payment_method: PaymentMethod = Field(..., description="cod | wallet | razorpay")
    coupon_code: Optional[str] = Field(None, max_length=12)

    model_config = {"frozen": True}


class GatewayCheckoutDTO(BaseModel):
    """What the browser needs to open the gateway checkout widget."""

    remote_order_id: str
    amount_minor: int = Field(..., ge=0, description="Amount in paise")
    currency: str
    receipt: str
    key_id: str

    model_config = {"frozen": True}


class PlaceOrderResponse(BaseModel):
    order: OrderDTO
    gateway: Optional[GatewayCheckoutDTO] = None

    model_config = {"frozen": True}


class VerifyPaymentRequest(BaseModel):
    remote_order_id: str = Field(..., min_length=1)
    remote_payment_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class PaymentFailedRequest(BaseModel):
    remote_order_id: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class CancelRequest(BaseModel):
    reason: str = Field(default="Cancelled by customer", min_length=1, max_length=500)

    model_config = {"frozen": True}


class StatusUpdateRequest(BaseModel):
    status: OrderStatus

    model_config = {"frozen": True}


class ReturnCreateRequest(BaseModel):
    """Return one line (`line_id`) or, when omitted, the whole order."""

    line_id: Optional[str] = None
    reason: str = Field(..., min_length=1, max_length=500)

    model_config = {"frozen": True}


class ReturnItemDTO(BaseModel):
    line_id: str
    product_id: str
    quantity: int

    model_config = {"frozen": True}


class ReturnRequestDTO(BaseModel):
    return_id: str
    order_id: str
    user_id: str
    reason: str
    items: List[ReturnItemDTO]
    whole_order: bool
    status: str
    refunded_amount: Optional[Decimal] = None
    created_at: datetime
    resolved_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @classmethod
    def from_domain(cls, request: ReturnRequest) -> "ReturnRequestDTO":
        return cls(
            return_id=request.return_id,
            order_id=request.order_id,
            user_id=request.user_id,
            reason=request.reason,
            items=[
                ReturnItemDTO(line_id=i.line_id, product_id=i.product_id, quantity=i.quantity)
                for i in request.items
            ],
            whole_order=request.whole_order,
            status=request.status.value,
            refunded_amount=(
                request.refunded_amount.amount if request.refunded_amount is not None else None
            ),
            created_at=request.created_at,
            resolved_at=request.resolved_at,
        )
