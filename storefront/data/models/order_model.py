"""SQLAlchemy ORM models for Order and ReturnRequest aggregates."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .base import Base


class OrderModel(Base):
    """SQLAlchemy ORM model for orders table."""

    __tablename__ = "orders"

    order_id = Column(String(32), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)

    status = Column(String(32), nullable=False, default="Pending", index=True)
    payment_method = Column(String(16), nullable=False)
    payment_status = Column(String(16), nullable=False, default="pending", index=True)

    # Money
    currency = Column(String(3), nullable=False, default="INR")
    order_amount = Column(Numeric(12, 2), nullable=False)
    shipping_charge = Column(Numeric(12, 2), nullable=False, default=0)
    coupon_code = Column(String(12), nullable=True)
    coupon_discount = Column(Numeric(12, 2), nullable=False, default=0)
    refunded_amount = Column(Numeric(12, 2), nullable=False, default=0)
    stock_committed = Column(Boolean, nullable=False, default=False)

    # Delivery address snapshot
    delivery_address = Column(JSON, nullable=False)

    # Gateway correlation
    remote_order_id = Column(String(64), nullable=True, unique=True)
    remote_payment_id = Column(String(64), nullable=True)
    payment_signature = Column(String(128), nullable=True)

    cancellation_reason = Column(Text, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    return_reason = Column(Text, nullable=True)
    return_requested_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Optimistic concurrency
    version = Column(Integer, nullable=False, default=1)

    lines = relationship(
        "OrderLineModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLineModel.position",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_orders_user_created", "user_id", "created_at"),
        Index("ix_orders_payment_created", "payment_status", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<OrderModel {self.order_id} {self.status}/{self.payment_status}>"


class OrderLineModel(Base):
    """SQLAlchemy ORM model for order_lines table."""

    __tablename__ = "order_lines"

    line_id = Column(String(36), primary_key=True)
    order_id = Column(
        String(32), ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)
    product_id = Column(String(36), nullable=False, index=True)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    final_price = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    status = Column(String(32), nullable=False, default="Ordered")

    order = relationship("OrderModel", back_populates="lines")


class ReturnRequestModel(Base):
    """SQLAlchemy ORM model for return_requests table."""

    __tablename__ = "return_requests"

    return_id = Column(String(36), primary_key=True)
    order_id = Column(
        String(32), ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String(64), nullable=False, index=True)
    reason = Column(Text, nullable=False)
    items = Column(JSON, nullable=False)
    whole_order = Column(Boolean, nullable=False, default=False)
    status = Column(String(16), nullable=False, default="Pending", index=True)
    refunded_amount = Column(Numeric(12, 2), nullable=True)
    currency = Column(String(3), nullable=False, default="INR")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    resolved_at = Column(DateTime, nullable=True)
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}
