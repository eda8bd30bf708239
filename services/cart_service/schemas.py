from typing import Dict, Literal

from pydantic import Field

from shared.schemas import CamelModel

ItemType = Literal["product", "deal"]


class CartLineAdd(CamelModel):
    item_id: str
    item_type: ItemType = "product"
    quantity: int = Field(default=1, ge=1)


class CartLineUpdate(CamelModel):
    item_id: str
    item_type: ItemType = "product"
    quantity: int = Field(..., ge=0)


class CartData(CamelModel):
    products: Dict[str, int] = {}
    deals: Dict[str, int] = {}


class CartResponse(CamelModel):
    success: bool = True
    cart_data: CartData
