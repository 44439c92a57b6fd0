"""SQLAlchemy ORM models for catalog, cart, coupon and wallet tables."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)

from .base import Base


class CategoryModel(Base):
    __tablename__ = "categories"

    category_id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False, unique=True)
    is_listed = Column(Boolean, nullable=False, default=True)


class ProductModel(Base):
    """Product row; `stock` is mutated only with conditional UPDATEs."""

    __tablename__ = "products"

    product_id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    category_id = Column(String(36), ForeignKey("categories.category_id"), nullable=False, index=True)
    price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    product_offer = Column(Numeric(5, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    is_listed = Column(Boolean, nullable=False, default=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),)


class OfferModel(Base):
    __tablename__ = "offers"

    offer_id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    discount_type = Column(String(16), nullable=False)
    discount_value = Column(Numeric(12, 2), nullable=False)
    max_discount = Column(Numeric(12, 2), nullable=True)
    category_ids = Column(JSON, nullable=False, default=list)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)


class AddressModel(Base):
    __tablename__ = "addresses"

    address_id = Column(String(36), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    line1 = Column(String(255), nullable=False)
    line2 = Column(String(255), nullable=False, default="")
    landmark = Column(String(255), nullable=False, default="")
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pincode = Column(String(12), nullable=False)
    phone = Column(String(20), nullable=False)


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.product_id"), nullable=False)
    product_name = Column(String(255), nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    added_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_cart_user_product"),)


class CouponModel(Base):
    __tablename__ = "coupons"

    code = Column(String(12), primary_key=True)
    name = Column(String(255), nullable=False)
    discount_type = Column(String(16), nullable=False)
    discount_value = Column(Numeric(12, 2), nullable=False)
    max_discount = Column(Numeric(12, 2), nullable=True)
    minimum_price = Column(Numeric(12, 2), nullable=False, default=0)
    expires_at = Column(DateTime, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    usage_limit = Column(Integer, nullable=True)
    usage_per_user_limit = Column(Integer, nullable=False, default=1)
    coupon_used = Column(Integer, nullable=False, default=0)
    user_usage = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}


class WalletModel(Base):
    __tablename__ = "wallets"

    user_id = Column(String(64), primary_key=True)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="INR")
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}


class WalletTransactionModel(Base):
    """Append-only ledger rows."""

    __tablename__ = "wallet_transactions"

    transaction_id = Column(String(36), primary_key=True)
    user_id = Column(String(64), ForeignKey("wallets.user_id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    type = Column(String(8), nullable=False)
    description = Column(String(255), nullable=False)
    occurred_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    seq = Column(Integer, nullable=False, default=0)
