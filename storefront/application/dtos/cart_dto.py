"""Application DTOs for cart operations."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.domain.entities import Cart
from storefront.domain.value_objects import Money


class CartItemDTO(BaseModel):
    product_id: str
    product_name: str
    quantity: int = Field(..., gt=0)
    price: Decimal = Field(..., ge=0, description="Unit price snapshot taken at add time")
    total: Decimal = Field(..., ge=0)

    model_config = {"frozen": True}


class CartDTO(BaseModel):
    user_id: str
    items: List[CartItemDTO] = Field(default_factory=list)
    subtotal: Decimal
    shipping_charge: Decimal
    total: Decimal
    currency: str = "INR"

    model_config = {"frozen": True}

    @classmethod
    def from_domain(cls, cart: Cart, shipping_charge: Money) -> "CartDTO":
        subtotal = cart.subtotal
        return cls(
            user_id=cart.user_id,
            items=[
                CartItemDTO(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    price=item.price.amount,
                    total=item.total.amount,
                )
                for item in cart.items
            ],
            subtotal=subtotal.amount,
            shipping_charge=shipping_charge.amount,
            total=(subtotal + shipping_charge).amount,
            currency=cart.currency,
        )


class AddToCartRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=1)

    model_config = {"frozen": True}


class UpdateCartItemRequest(BaseModel):
    """Increment (+n) or decrement (-n) the quantity of a cart item."""

    delta: int = Field(..., description="Quantity change, non-zero")

    model_config = {"frozen": True}


class PriceQuoteDTO(BaseModel):
    product_id: str
    original_price: Decimal
    final_price: Decimal
    discount_amount: Decimal
    discount_percentage: Decimal
    applied_offer_type: Optional[str] = None

    model_config = {"frozen": True}
