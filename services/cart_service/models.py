from sqlalchemy import Column, Integer, String, UniqueConstraint
from shared.config.database import Base

class CartItem(Base):
    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("user_id", "item_type", "item_id", name="uq_cart_items_line"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    item_type = Column(String(10), nullable=False)  # product, deal
    item_id = Column(String(64), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
