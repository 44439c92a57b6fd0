"""Admin report DTOs."""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, Field


class SalesSummaryDTO(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    order_count: int = Field(..., ge=0)
    gross_amount: Decimal = Field(..., description="Sum of order_amount, cancelled excluded")
    coupon_discount_total: Decimal
    refunded_total: Decimal
    by_status: Dict[str, int] = Field(default_factory=dict)
    by_payment_method: Dict[str, int] = Field(default_factory=dict)
    currency: str = "INR"

    model_config = {"frozen": True}
