from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from shared.schemas import CamelModel

ProductStatus = Literal["draft", "published", "archived", "scheduled"]


class ProductCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    category: Optional[str] = None
    price: float = Field(..., ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    quantity: int = Field(default=0, ge=0)
    status: ProductStatus = "draft"
    bestseller: bool = False
    images: List[str] = []


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    quantity: Optional[int] = Field(default=None, ge=0)
    status: Optional[ProductStatus] = None
    bestseller: Optional[bool] = None
    images: Optional[List[str]] = None


class ProductResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = ""
    category: Optional[str] = None
    price: float
    discount_price: Optional[float] = None
    quantity: int
    status: str
    total_sales: int
    bestseller: bool
    images: List[str] = []


class DealProduct(CamelModel):
    product_id: Optional[int] = None
    name: str
    quantity: int = Field(default=1, ge=1)


class DealCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    deal_type: str = "flash_sale"
    original_total: float = Field(default=0, ge=0)
    deal_price: float = Field(..., ge=0)
    status: ProductStatus = "draft"
    products: List[DealProduct] = []
    images: List[str] = []
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None


class DealResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = ""
    deal_type: str
    original_total: float
    deal_price: float
    status: str
    products: List[DealProduct] = []
    images: List[str] = []
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
