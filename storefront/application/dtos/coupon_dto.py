"""Application DTOs for coupon operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from storefront.domain.entities import Coupon


class CouponDTO(BaseModel):
    code: str
    name: str
    discount_type: str
    discount_value: Decimal
    max_discount: Optional[Decimal] = None
    minimum_price: Decimal
    expires_at: datetime
    is_active: bool
    usage_limit: Optional[int] = None
    usage_per_user_limit: int
    coupon_used: int

    model_config = {"frozen": True}

    @classmethod
    def from_domain(cls, coupon: Coupon) -> "CouponDTO":
        return cls(
            code=coupon.code,
            name=coupon.name,
            discount_type=coupon.rule.kind,
            discount_value=coupon.rule.value,
            max_discount=coupon.rule.max_discount,
            minimum_price=coupon.minimum_price,
            expires_at=coupon.expires_at,
            is_active=coupon.is_active,
            usage_limit=coupon.usage_limit,
            usage_per_user_limit=coupon.usage_per_user_limit,
            coupon_used=coupon.coupon_used,
        )


class CreateCouponRequest(BaseModel):
    """Admin coupon creation; a code is generated when none is given."""

    code: Optional[str] = Field(None, min_length=6, max_length=12, pattern=r"^[A-Za-z0-9]+$")
    name: str = Field(..., min_length=1, max_length=255)
    discount_type: Literal["percentage", "flat"]
    discount_value: Decimal = Field(..., gt=0)
    max_discount: Optional[Decimal] = Field(None, gt=0)
    minimum_price: Decimal = Field(default=Decimal("0"), ge=0)
    expires_at: datetime
    usage_limit: Optional[int] = Field(None, ge=1)
    usage_per_user_limit: int = Field(default=1, ge=1)
    code_length: int = Field(default=8, ge=6, le=12)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _percentage_in_range(self) -> "CreateCouponRequest":
        if self.discount_type == "percentage" and self.discount_value > 100:
            raise ValueError("Percentage discount cannot exceed 100")
        return self


class CouponPreviewRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=12)

    model_config = {"frozen": True}


class CouponPreviewDTO(BaseModel):
    code: str
    subtotal: Decimal
    shipping_charge: Decimal
    discount: Decimal
    total: Decimal

    model_config = {"frozen": True}


class AvailableCouponDTO(BaseModel):
    coupon: CouponDTO
    eligible: bool = Field(..., description="Cart subtotal meets the minimum")
    discount: Decimal = Field(..., ge=0, description="Discount on the current cart")

    model_config = {"frozen": True}


class AvailableCouponListDTO(BaseModel):
    coupons: List[AvailableCouponDTO] = Field(default_factory=list)

    model_config = {"frozen": True}
