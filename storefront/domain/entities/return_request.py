"""Return request aggregate - Pending -> Approved | Rejected."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..enums import ReturnStatus
from ..events.base import DomainEvent
from ..events.order_events import ReturnRequestedEvent, ReturnResolvedEvent
from ..exceptions import NotEligible
from ..value_objects import Money, new_id, utcnow


@dataclass(frozen=True)
class ReturnItem:
    line_id: str
    product_id: str
    quantity: int


@dataclass
class ReturnRequest:
    return_id: str
    order_id: str
    user_id: str
    reason: str
    items: List[ReturnItem]
    whole_order: bool = False
    status: ReturnStatus = ReturnStatus.PENDING
    refunded_amount: Optional[Money] = None
    created_at: datetime = field(default_factory=utcnow)
    resolved_at: Optional[datetime] = None

    _domain_events: List[DomainEvent] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def open(
        cls,
        order_id: str,
        user_id: str,
        reason: str,
        items: List[ReturnItem],
        whole_order: bool,
        now: Optional[datetime] = None,
    ) -> "ReturnRequest":
        request = cls(
            return_id=new_id(),
            order_id=order_id,
            user_id=user_id,
            reason=reason,
            items=items,
            whole_order=whole_order,
            created_at=now or utcnow(),
        )
        request._domain_events.append(
            ReturnRequestedEvent(
                order_id=order_id,
                user_id=user_id,
                return_id=request.return_id,
                line_ids=request.line_ids,
                reason=reason,
            )
        )
        return request

    @property
    def line_ids(self) -> List[str]:
        return [item.line_id for item in self.items]

    def approve(self, refund: Money, now: Optional[datetime] = None) -> None:
        self._resolve(ReturnStatus.APPROVED, now)
        self.refunded_amount = refund
        self._record_resolution(refund)

    def reject(self, now: Optional[datetime] = None) -> None:
        self._resolve(ReturnStatus.REJECTED, now)
        self._record_resolution(None)

    def ensure_pending(self) -> None:
        if self.status != ReturnStatus.PENDING:
            raise NotEligible(
                f"Return request {self.return_id} is already {self.status.value}"
            )

    def _resolve(self, outcome: ReturnStatus, now: Optional[datetime]) -> None:
        self.ensure_pending()
        self.status = outcome
        self.resolved_at = now or utcnow()

    def _record_resolution(self, refund: Optional[Money]) -> None:
        self._domain_events.append(
            ReturnResolvedEvent(
                order_id=self.order_id,
                user_id=self.user_id,
                return_id=self.return_id,
                outcome=self.status.value,
                refund_amount=refund.amount if refund is not None else None,
            )
        )

    def get_domain_events(self) -> List[DomainEvent]:
        return list(self._domain_events)

    def clear_domain_events(self) -> None:
        self._domain_events.clear()
