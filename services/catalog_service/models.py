from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, CheckConstraint, Column, DateTime, Float, Integer, String, Text
from shared.config.database import Base

PRODUCT_STATUSES = ("draft", "published", "archived", "scheduled")


def _utcnow():
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"
    # Conditional deductions keep this true; the constraint is the backstop
    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, default="")
    category = Column(String(120), nullable=True)
    price = Column(Float, nullable=False)
    discount_price = Column(Float, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="draft")
    total_sales = Column(Integer, nullable=False, default=0)
    bestseller = Column(Boolean, nullable=False, default=False)
    images = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    @property
    def is_orderable(self) -> bool:
        return self.status == "published"


class Deal(Base):
    """A bundle of products sold as one line. Deals hold no stock of their own."""

    __tablename__ = "deals"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, default="")
    deal_type = Column(String(40), nullable=False, default="flash_sale")
    original_total = Column(Float, nullable=False, default=0)
    deal_price = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default="draft")
    products = Column(JSON, nullable=False, default=list)  # [{productId, name, quantity}]
    images = Column(JSON, nullable=False, default=list)
    starts_at = Column(DateTime(timezone=True), nullable=True)
    ends_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
