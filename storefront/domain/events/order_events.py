"""
Order lifecycle domain events.

Recorded on the Order and ReturnRequest aggregates and published
to the event bus once the enclosing transaction has committed.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from .base import DomainEvent


@dataclass
class _OrderEvent(DomainEvent):
    order_id: str = ""

    def __post_init__(self):
        if not self.aggregate_id and self.order_id:
            object.__setattr__(self, "aggregate_id", self.order_id)
        super().__post_init__()


@dataclass
class OrderPlacedEvent(_OrderEvent):
    """
    Order was placed at checkout.

    Consumers: confirmation mail, sales dashboard
    """

    payment_method: str = ""
    payment_status: str = ""
    order_amount: Optional[Decimal] = None
    coupon_code: Optional[str] = None
    line_count: int = 0


@dataclass
class PaymentVerifiedEvent(_OrderEvent):
    """Gateway payment signature verified and order marked paid."""

    remote_order_id: str = ""
    remote_payment_id: str = ""
    amount: Optional[Decimal] = None


@dataclass
class OrderStatusChangedEvent(_OrderEvent):
    """
    Order status changed.

    Tracks transitions (Pending -> Processing -> Shipped, etc.).
    """

    previous_status: str = ""
    new_status: str = ""
    reason: Optional[str] = None


@dataclass
class OrderLineCancelledEvent(_OrderEvent):
    """One or more lines were cancelled, with the amount refunded."""

    line_ids: List[str] = field(default_factory=list)
    refund_amount: Optional[Decimal] = None
    reason: Optional[str] = None


@dataclass
class ReturnRequestedEvent(_OrderEvent):
    return_id: str = ""
    line_ids: List[str] = field(default_factory=list)
    reason: str = ""


@dataclass
class ReturnResolvedEvent(_OrderEvent):
    """Return request approved or rejected by an admin."""

    return_id: str = ""
    outcome: str = ""
    refund_amount: Optional[Decimal] = None
