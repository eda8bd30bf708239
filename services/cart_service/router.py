from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import get_current_user

from .schemas import CartData, CartLineAdd, CartLineUpdate, CartResponse
from .service import CartService

router = APIRouter(tags=["Cart"])


@router.get("/", response_model=CartResponse)
async def get_cart(user_id: int = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return CartResponse(cart_data=await CartService.get_cart(db, user_id))


@router.post("/add", response_model=CartResponse)
async def add_item(
    item: CartLineAdd,
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return CartResponse(cart_data=await CartService.add_item(db, user_id, item))


@router.post("/update", response_model=CartResponse)
async def update_item(
    item: CartLineUpdate,
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Sets a line's quantity; 0 removes the line."""
    return CartResponse(cart_data=await CartService.update_item(db, user_id, item))


@router.post("/merge", response_model=CartResponse)
async def merge_cart(
    guest_cart: CartData,
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Folds the browser's guest cart into the account cart after login."""
    return CartResponse(cart_data=await CartService.merge_guest_cart(db, user_id, guest_cart))


@router.delete("/", status_code=204)
async def clear_cart(user_id: int = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    await CartService.clear_cart(db, user_id)
    return
