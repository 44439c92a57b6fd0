"""
Lifecycle status enums.

Values are the strings stored in the database and shown to clients.
"""
from enum import Enum


class OrderStatus(str, Enum):
    """Order status values."""

    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURN_REQUESTED = "Return Requested"
    RETURNED = "Returned"


# Forward-only fulfilment path an admin may walk an order along.
FULFILMENT_FLOW = [
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
]

CANCELLABLE_STATUSES = frozenset(FULFILMENT_FLOW[:4])
LINE_CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PROCESSING})


class LineStatus(str, Enum):
    """Order line status values."""

    ORDERED = "Ordered"
    CANCELLED = "Cancelled"
    RETURN_REQUESTED = "Return Requested"
    RETURNED = "Returned"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    COD = "cod"
    WALLET = "wallet"
    RAZORPAY = "razorpay"


class ReturnStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class TransactionType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"
