from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from .models import CartItem

class CartRepository:
    @staticmethod
    async def get_lines(db: AsyncSession, user_id: int):
        result = await db.execute(
            select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.id)
        )
        return result.scalars().all()

    @staticmethod
    async def add_item(db: AsyncSession, item: CartItem):
        result = await db.execute(
            select(CartItem)
            .where(CartItem.user_id == item.user_id)
            .where(CartItem.item_type == item.item_type)
            .where(CartItem.item_id == item.item_id)
        )
        existing_item = result.scalars().first()

        if existing_item:
            existing_item.quantity += item.quantity
        else:
            db.add(item)

        await db.commit()
        return True

    @staticmethod
    async def set_quantity(db: AsyncSession, user_id: int, item_type: str, item_id: str, quantity: int):
        await CartRepository.remove_item(db, user_id, item_type, item_id)
        if quantity > 0:
            db.add(CartItem(user_id=user_id, item_type=item_type, item_id=item_id, quantity=quantity))
        await db.commit()

    @staticmethod
    async def remove_item(db: AsyncSession, user_id: int, item_type: str, item_id: str):
        """Stages removal of one line. Caller commits."""
        stmt = delete(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.item_type == item_type,
            CartItem.item_id == item_id,
        )
        await db.execute(stmt)

    @staticmethod
    async def clear_cart(db: AsyncSession, user_id: int):
        """Stages deletion of every line for the user. Caller commits."""
        await db.execute(delete(CartItem).where(CartItem.user_id == user_id))

    @staticmethod
    async def replace_cart(db: AsyncSession, user_id: int, products: dict, deals: dict):
        """Swaps the whole cart in one commit."""
        await CartRepository.clear_cart(db, user_id)
        for item_type, lines in (("product", products), ("deal", deals)):
            for item_id, quantity in lines.items():
                db.add(CartItem(user_id=user_id, item_type=item_type, item_id=item_id, quantity=quantity))
        await db.commit()
