from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from .models import Deal, Product

class ProductRepository:

    @staticmethod
    async def create_product(db: AsyncSession, product: Product):
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product

    @staticmethod
    async def list_products(db: AsyncSession, status: Optional[str] = "published"):
        stmt = select(Product).order_by(Product.created_at.desc(), Product.id.desc())
        if status is not None:
            stmt = stmt.where(Product.status == status)
        result = await db.execute(stmt)
        return result.scalars().all()

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int):
        result = await db.execute(select(Product).where(Product.id == product_id))
        return result.scalars().first()

    @staticmethod
    async def get_published_by_name(db: AsyncSession, name: str):
        result = await db.execute(
            select(Product)
            .where(Product.name == name, Product.status == "published")
            .order_by(Product.id)
        )
        return result.scalars().first()

    @staticmethod
    async def update_product(db: AsyncSession, product: Product):
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product

    # The two stock primitives below only stage changes in the caller's
    # transaction; the order workflow decides when to commit or roll back.

    @staticmethod
    async def deduct_stock(db: AsyncSession, product_id: int, quantity: int) -> bool:
        """Decrement stock by ``quantity`` only if at least that much is on hand."""
        result = await db.execute(
            update(Product)
            .where(Product.id == product_id, Product.quantity >= quantity)
            .values(
                quantity=Product.quantity - quantity,
                total_sales=Product.total_sales + quantity,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    async def restore_stock(db: AsyncSession, product_id: int, quantity: int) -> bool:
        """Return ``quantity`` units to stock and take them off total sales."""
        result = await db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(
                quantity=Product.quantity + quantity,
                total_sales=Product.total_sales - quantity,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class DealRepository:

    @staticmethod
    async def create_deal(db: AsyncSession, deal: Deal):
        db.add(deal)
        await db.commit()
        await db.refresh(deal)
        return deal

    @staticmethod
    async def list_deals(db: AsyncSession, status: Optional[str] = "published"):
        stmt = select(Deal).order_by(Deal.created_at.desc(), Deal.id.desc())
        if status is not None:
            stmt = stmt.where(Deal.status == status)
        result = await db.execute(stmt)
        return result.scalars().all()

    @staticmethod
    async def get_deal_by_id(db: AsyncSession, deal_id: int):
        result = await db.execute(select(Deal).where(Deal.id == deal_id))
        return result.scalars().first()
