"""Identifiers and clock helpers."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ExecutionID:
    """Unique identifier for transaction tracing."""

    value: UUID

    @classmethod
    def generate(cls) -> "ExecutionID":
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


def new_id() -> str:
    return str(uuid4())


def new_order_id() -> str:
    """Human-friendly order reference, e.g. ORD-9F2C41A07B3E."""
    return f"ORD-{uuid4().hex[:12].upper()}"


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
