import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from .merge import merge_carts
from .models import CartItem
from .repository import CartRepository
from .schemas import CartData, CartLineAdd, CartLineUpdate

logger = structlog.get_logger(__name__)

class CartService:
    @staticmethod
    async def get_cart(db: AsyncSession, user_id: int) -> CartData:
        cart = CartData()
        for line in await CartRepository.get_lines(db, user_id):
            bucket = cart.products if line.item_type == "product" else cart.deals
            bucket[line.item_id] = line.quantity
        return cart

    @staticmethod
    async def add_item(db: AsyncSession, user_id: int, data: CartLineAdd) -> CartData:
        item = CartItem(
            user_id=user_id,
            item_type=data.item_type,
            item_id=data.item_id,
            quantity=data.quantity
        )
        await CartRepository.add_item(db, item)
        return await CartService.get_cart(db, user_id)

    @staticmethod
    async def update_item(db: AsyncSession, user_id: int, data: CartLineUpdate) -> CartData:
        await CartRepository.set_quantity(db, user_id, data.item_type, data.item_id, data.quantity)
        return await CartService.get_cart(db, user_id)

    @staticmethod
    async def merge_guest_cart(db: AsyncSession, user_id: int, guest: CartData) -> CartData:
        server = await CartService.get_cart(db, user_id)
        merged = CartData(
            products=merge_carts(guest.products, server.products),
            deals=merge_carts(guest.deals, server.deals),
        )
        await CartRepository.replace_cart(db, user_id, merged.products, merged.deals)
        logger.info(
            "cart_merged",
            user_id=user_id,
            products=len(merged.products),
            deals=len(merged.deals),
        )
        return merged

    @staticmethod
    async def clear_cart(db: AsyncSession, user_id: int):
        await CartRepository.clear_cart(db, user_id)
        await db.commit()
