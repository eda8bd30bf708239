from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from shared.config.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=True, index=True)  # None for guest checkouts
    is_guest = Column(Boolean, nullable=False, default=False, index=True)
    amount = Column(Float, nullable=False)
    delivery_charges = Column(Float, nullable=False, default=0)
    address = Column(JSON, nullable=False)
    customer_name = Column(String(120), nullable=True)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(32), nullable=True)
    payment_method = Column(String(20), nullable=False, default="COD")
    payment = Column(Boolean, nullable=False, default=False)
    status = Column(String(30), nullable=False, default="Order Placed", index=True)
    cancellation_reason = Column(Text, nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by = Column(String(10), nullable=True)  # user, admin
    date = Column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)

    # Items are a frozen snapshot owned by the order
    items = relationship(
        "OrderItem",
        back_populates="order",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    @property
    def customer_details(self) -> dict:
        return {
            "name": self.customer_name,
            "email": self.customer_email,
            "phone": self.customer_phone,
        }


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, nullable=True)  # None for deal lines with no live product
    name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False, default=0)
    image = Column(String(512), nullable=True)
    category = Column(String(120), nullable=True)
    is_from_deal = Column(Boolean, nullable=False, default=False)
    deal_name = Column(String(255), nullable=True)
    deal_image = Column(String(512), nullable=True)
    deal_description = Column(Text, nullable=True)

    order = relationship("Order", back_populates="items")
