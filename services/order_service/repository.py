from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from .models import Order

class OrderRepository:
    @staticmethod
    def add_order(db: AsyncSession, order: Order):
        """Stages a new order in the caller's transaction."""
        db.add(order)
        return order

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int):
        result = await db.execute(select(Order).where(Order.id == order_id))
        return result.scalars().first()

    @staticmethod
    async def get_order_for_update(db: AsyncSession, order_id: int):
        # Row lock where the backend supports it (ignored by SQLite)
        result = await db.execute(
            select(Order).where(Order.id == order_id).with_for_update()
        )
        return result.scalars().first()

    @staticmethod
    async def list_orders(db: AsyncSession):
        result = await db.execute(select(Order).order_by(Order.date.desc(), Order.id.desc()))
        return result.scalars().all()

    @staticmethod
    async def list_user_orders(db: AsyncSession, user_id: int):
        result = await db.execute(
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.date.desc(), Order.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def list_guest_orders(db: AsyncSession, email: Optional[str] = None):
        """Guest orders, newest first, optionally narrowed to one email (case-insensitive)."""
        query = select(Order).where(Order.is_guest.is_(True))
        if email:
            query = query.where(func.lower(Order.customer_email) == email.strip().lower())
        result = await db.execute(query.order_by(Order.date.desc(), Order.id.desc()))
        return result.scalars().all()
