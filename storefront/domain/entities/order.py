"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from ..enums import (
    CANCELLABLE_STATUSES,
    FULFILMENT_FLOW,
    LINE_CANCELLABLE_STATUSES,
    LineStatus,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from ..events.base import DomainEvent
from ..events.order_events import (
    OrderLineCancelledEvent,
    OrderPlacedEvent,
    OrderStatusChangedEvent,
    PaymentVerifiedEvent,
)
from ..exceptions import NotEligible, NotFound, ValidationError
from ..services.refunds import proportional_refund
from ..value_objects import Money, new_id, new_order_id, utcnow

# Orders are only ever compared against their amounts within a cent.
AMOUNT_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class DeliveryAddress:
    """Snapshot of the address book entry taken at checkout."""
    name: str
    line1: str
    city: str
    state: str
    pincode: str
    phone: str
    line2: str = ""
    landmark: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "line1": self.line1,
            "line2": self.line2,
            "landmark": self.landmark,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
            "phone": self.phone,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "DeliveryAddress":
        return cls(
            name=data.get("name", ""),
            line1=data.get("line1", ""),
            line2=data.get("line2", ""),
            landmark=data.get("landmark", ""),
            city=data.get("city", ""),
            state=data.get("state", ""),
            pincode=data.get("pincode", ""),
            phone=data.get("phone", ""),
        )


@dataclass
class OrderLine:
    """Individual line item within an order."""
    line_id: str
    product_id: str
    product_name: str
    quantity: int
    price: Money
    final_price: Money
    total_price: Money
    status: LineStatus = LineStatus.ORDERED

    @property
    def is_refundable(self) -> bool:
        """True while the line's value is still part of the order amount."""
        return self.status not in (LineStatus.CANCELLED, LineStatus.RETURNED)


@dataclass
class RefundOutcome:
    """Result of a cancellation or approved return."""
    amount: Money
    lines: List[OrderLine]


@dataclass
class Order:
    """
    Order aggregate root.

    Invariant: order_amount == sum(line totals) + shipping_charge
    - coupon_discount - refunded_amount (within a cent).
    """
    order_id: str
    user_id: str
    lines: List[OrderLine]
    delivery_address: DeliveryAddress
    payment_method: PaymentMethod
    shipping_charge: Money
    coupon_discount: Money
    order_amount: Money
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    coupon_code: Optional[str] = None
    refunded_amount: Optional[Money] = None
    stock_committed: bool = False

    remote_order_id: Optional[str] = None
    remote_payment_id: Optional[str] = None
    payment_signature: Optional[str] = None

    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    return_reason: Optional[str] = None
    return_requested_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    _domain_events: List[DomainEvent] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        if self.refunded_amount is None:
            self.refunded_amount = Money.zero(self.currency)

    # =========================================================================
    # FACTORY
    # =========================================================================

    @classmethod
    def place(
        cls,
        user_id: str,
        lines: List[OrderLine],
        delivery_address: DeliveryAddress,
        payment_method: PaymentMethod,
        shipping_charge: Money,
        coupon_discount: Money,
        coupon_code: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "Order":
        """Create a new order from priced lines and record OrderPlacedEvent."""
        if not lines:
            raise ValidationError("Cannot place an order without items")

        items_total = sum((line.total_price for line in lines[1:]), lines[0].total_price)
        order_amount = items_total + shipping_charge - coupon_discount
        if order_amount.amount < 0:
            order_amount = Money.zero(order_amount.currency)

        order = cls(
            order_id=new_order_id(),
            user_id=user_id,
            lines=lines,
            delivery_address=delivery_address,
            payment_method=payment_method,
            shipping_charge=shipping_charge,
            coupon_discount=coupon_discount,
            coupon_code=coupon_code,
            order_amount=order_amount,
            created_at=now or utcnow(),
        )
        order._record_event(
            OrderPlacedEvent(
                order_id=order.order_id,
                user_id=user_id,
                payment_method=payment_method.value,
                payment_status=order.payment_status.value,
                order_amount=order_amount.amount,
                coupon_code=coupon_code,
                line_count=len(lines),
            )
        )
        return order

    @staticmethod
    def new_line(
        product_id: str,
        product_name: str,
        quantity: int,
        price: Money,
        final_price: Money,
    ) -> OrderLine:
        return OrderLine(
            line_id=new_id(),
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
            price=price,
            final_price=final_price,
            total_price=final_price * quantity,
        )

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def currency(self) -> str:
        return self.order_amount.currency

    @property
    def items_total(self) -> Money:
        total = Money.zero(self.currency)
        for line in self.lines:
            total = total + line.total_price
        return total

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    def line(self, line_id: str) -> OrderLine:
        for line in self.lines:
            if line.line_id == line_id:
                return line
        raise NotFound(f"Line {line_id} not found in order {self.order_id}")

    def refundable_lines(self) -> List[OrderLine]:
        return [line for line in self.lines if line.is_refundable]

    def amount_is_consistent(self) -> bool:
        """Check the order amount invariant."""
        expected = (
            self.items_total
            + self.shipping_charge
            - self.coupon_discount
            - self.refunded_amount
        )
        return abs(expected.amount - self.order_amount.amount) <= AMOUNT_TOLERANCE

    def refund_for(self, lines: Iterable[OrderLine]) -> Money:
        """Proportional refund owed for `lines` at this point in the lifecycle."""
        targets = list(lines)
        remaining = self.refundable_lines()
        covers_rest = {l.line_id for l in targets} >= {l.line_id for l in remaining}
        amount = proportional_refund(
            line_totals=[l.total_price.amount for l in targets],
            items_total=self.items_total.amount,
            shipping_charge=self.shipping_charge.amount,
            coupon_discount=self.coupon_discount.amount,
            remaining_amount=self.order_amount.amount,
            covers_all_remaining=covers_rest,
        )
        return Money(amount=amount, currency=self.currency)

    # =========================================================================
    # PAYMENT
    # =========================================================================

    def attach_remote_order(self, remote_order_id: str) -> None:
        self.remote_order_id = remote_order_id

    def mark_paid(
        self,
        remote_payment_id: Optional[str] = None,
        signature: Optional[str] = None,
    ) -> None:
        """Flip a pending/failed payment to paid and start processing."""
        if self.payment_status == PaymentStatus.PAID:
            raise NotEligible(f"Order {self.order_id} is already paid")
        if self.status != OrderStatus.PENDING and self.payment_method == PaymentMethod.RAZORPAY:
            raise NotEligible(
                f"Order {self.order_id} is {self.status.value}, payment cannot be applied"
            )

        self.payment_status = PaymentStatus.PAID
        self.remote_payment_id = remote_payment_id
        self.payment_signature = signature
        self._set_status(OrderStatus.PROCESSING, "Payment received")

        if self.payment_method == PaymentMethod.RAZORPAY:
            self._record_event(
                PaymentVerifiedEvent(
                    order_id=self.order_id,
                    user_id=self.user_id,
                    remote_order_id=self.remote_order_id or "",
                    remote_payment_id=remote_payment_id or "",
                    amount=self.order_amount.amount,
                )
            )

    def confirm_cash_on_delivery(self) -> None:
        self._set_status(OrderStatus.PROCESSING, "Cash on delivery order confirmed")

    def mark_payment_failed(self) -> None:
        if self.payment_status == PaymentStatus.PAID:
            raise NotEligible(f"Order {self.order_id} is already paid")
        self.payment_status = PaymentStatus.FAILED

    def reopen_payment(self, remote_order_id: str) -> None:
        """Retry a dismissed or failed gateway checkout with a new remote order."""
        if self.payment_method != PaymentMethod.RAZORPAY:
            raise NotEligible(f"Order {self.order_id} was not paid online")
        if self.payment_status == PaymentStatus.PAID:
            raise NotEligible(f"Order {self.order_id} is already paid")
        if self.status != OrderStatus.PENDING:
            raise NotEligible(f"Order {self.order_id} is {self.status.value}")
        self.remote_order_id = remote_order_id
        self.payment_status = PaymentStatus.PENDING

    # =========================================================================
    # STATUS
    # =========================================================================

    def advance_status(self, new_status: OrderStatus) -> None:
        """
        Move the order forward along the fulfilment flow.

        Delivering a cash-on-delivery order settles its payment.

        Raises:
            NotEligible: backwards, sideways or out-of-flow transition
        """
        if new_status == OrderStatus.CANCELLED:
            raise ValidationError("Use cancel() to cancel an order")
        if self.status not in FULFILMENT_FLOW or new_status not in FULFILMENT_FLOW:
            raise NotEligible(
                f"Cannot move order {self.order_id} from {self.status.value} "
                f"to {new_status.value}"
            )
        if FULFILMENT_FLOW.index(new_status) <= FULFILMENT_FLOW.index(self.status):
            raise NotEligible(
                f"Order {self.order_id} can only move forward from {self.status.value}"
            )
        if self.payment_method == PaymentMethod.RAZORPAY and not self.is_paid:
            raise NotEligible(f"Order {self.order_id} is awaiting online payment")

        self._set_status(new_status, "Status updated by admin")

        if new_status == OrderStatus.DELIVERED and self.payment_method == PaymentMethod.COD:
            self.payment_status = PaymentStatus.PAID

    # =========================================================================
    # CANCELLATION
    # =========================================================================

    def cancel(self, reason: str, now: Optional[datetime] = None) -> RefundOutcome:
        """
        Cancel the whole order.

        The full remaining order amount becomes refundable and every
        still-ordered line is cancelled.
        """
        if self.status not in CANCELLABLE_STATUSES:
            raise NotEligible(
                f"Order {self.order_id} cannot be cancelled in status {self.status.value}"
            )

        lines = [line for line in self.lines if line.status == LineStatus.ORDERED]
        refund = self.order_amount
        for line in lines:
            line.status = LineStatus.CANCELLED

        self._deduct(refund)
        self.cancellation_reason = reason
        self.cancelled_at = now or utcnow()
        self._set_status(OrderStatus.CANCELLED, reason)
        self._record_event(
            OrderLineCancelledEvent(
                order_id=self.order_id,
                user_id=self.user_id,
                line_ids=[line.line_id for line in lines],
                refund_amount=refund.amount,
                reason=reason,
            )
        )
        return RefundOutcome(amount=refund, lines=lines)

    def cancel_line(
        self, line_id: str, reason: str, now: Optional[datetime] = None
    ) -> RefundOutcome:
        """
        Cancel one line before it ships.

        Cancelling the last active line cancels the order.
        """
        if self.status not in LINE_CANCELLABLE_STATUSES:
            raise NotEligible(
                f"Items of order {self.order_id} cannot be cancelled in status "
                f"{self.status.value}"
            )
        line = self.line(line_id)
        if line.status != LineStatus.ORDERED:
            raise NotEligible(f"Line {line_id} is already {line.status.value}")

        refund = self.refund_for([line])
        line.status = LineStatus.CANCELLED
        self._deduct(refund)
        self._record_event(
            OrderLineCancelledEvent(
                order_id=self.order_id,
                user_id=self.user_id,
                line_ids=[line_id],
                refund_amount=refund.amount,
                reason=reason,
            )
        )

        if not any(l.status == LineStatus.ORDERED for l in self.lines):
            self.cancellation_reason = reason
            self.cancelled_at = now or utcnow()
            self._set_status(OrderStatus.CANCELLED, "All items cancelled")

        return RefundOutcome(amount=refund, lines=[line])

    # =========================================================================
    # RETURNS
    # =========================================================================

    def request_return(
        self,
        line_ids: Optional[List[str]],
        reason: str,
        now: Optional[datetime] = None,
    ) -> List[OrderLine]:
        """
        Flag delivered lines for return. No money moves here.

        Args:
            line_ids: lines to return, or None for the whole order
        """
        if self.status != OrderStatus.DELIVERED:
            raise NotEligible(
                f"Only delivered orders can be returned; order {self.order_id} "
                f"is {self.status.value}"
            )
        if not reason or not reason.strip():
            raise ValidationError("A return reason is required")

        whole_order = line_ids is None
        if whole_order:
            lines = [l for l in self.lines if l.status == LineStatus.ORDERED]
            if not lines:
                raise NotEligible(f"Order {self.order_id} has no returnable items")
        else:
            lines = [self.line(line_id) for line_id in dict.fromkeys(line_ids)]
            for line in lines:
                if line.status != LineStatus.ORDERED:
                    raise NotEligible(
                        f"Line {line.line_id} is {line.status.value} and cannot be returned"
                    )

        for line in lines:
            line.status = LineStatus.RETURN_REQUESTED

        self.return_reason = reason
        self.return_requested_at = now or utcnow()
        if whole_order:
            self._set_status(OrderStatus.RETURN_REQUESTED, reason)
        else:
            self._touch()
        return lines

    def approve_return(self, line_ids: List[str]) -> RefundOutcome:
        lines = self._lines_awaiting_return(line_ids)
        refund = self.refund_for(lines)
        for line in lines:
            line.status = LineStatus.RETURNED
        self._deduct(refund)

        remaining = [l for l in self.lines if l.status != LineStatus.CANCELLED]
        if all(l.status == LineStatus.RETURNED for l in remaining):
            self._set_status(OrderStatus.RETURNED, "Return approved")
        elif self.status == OrderStatus.RETURN_REQUESTED:
            self._set_status(OrderStatus.DELIVERED, "Return approved")
        return RefundOutcome(amount=refund, lines=lines)

    def reject_return(self, line_ids: List[str]) -> List[OrderLine]:
        lines = self._lines_awaiting_return(line_ids)
        for line in lines:
            line.status = LineStatus.ORDERED
        if self.status == OrderStatus.RETURN_REQUESTED:
            self._set_status(OrderStatus.DELIVERED, "Return rejected")
        else:
            self._touch()
        return lines

    def _lines_awaiting_return(self, line_ids: List[str]) -> List[OrderLine]:
        lines = [self.line(line_id) for line_id in line_ids]
        for line in lines:
            if line.status != LineStatus.RETURN_REQUESTED:
                raise NotEligible(
                    f"Line {line.line_id} is {line.status.value}, not awaiting return"
                )
        return lines

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _deduct(self, refund: Money) -> None:
        self.order_amount = self.order_amount - refund
        self.refunded_amount = self.refunded_amount + refund
        self._touch()

    def _touch(self) -> None:
        self.updated_at = utcnow()

    def _set_status(self, new_status: OrderStatus, reason: Optional[str] = None) -> None:
        previous = self.status
        self.status = new_status
        self._touch()
        if previous != new_status:
            self._record_event(
                OrderStatusChangedEvent(
                    order_id=self.order_id,
                    user_id=self.user_id,
                    previous_status=previous.value,
                    new_status=new_status.value,
                    reason=reason,
                )
            )

    # =========================================================================
    # EVENT COLLECTION
    # =========================================================================

    def get_domain_events(self) -> List[DomainEvent]:
        return list(self._domain_events)

    def clear_domain_events(self) -> None:
        self._domain_events.clear()

    def _record_event(self, event: DomainEvent) -> None:
        self._domain_events.append(event)
