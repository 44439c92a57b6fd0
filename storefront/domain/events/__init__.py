"""Domain events."""

from .base import DomainEvent
from .order_events import (
    OrderLineCancelledEvent,
    OrderPlacedEvent,
    OrderStatusChangedEvent,
    PaymentVerifiedEvent,
    ReturnRequestedEvent,
    ReturnResolvedEvent,
)

__all__ = [
    "DomainEvent",
    "OrderPlacedEvent",
    "PaymentVerifiedEvent",
    "OrderStatusChangedEvent",
    "OrderLineCancelledEvent",
    "ReturnRequestedEvent",
    "ReturnResolvedEvent",
]
