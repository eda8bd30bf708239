from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from shared.config.database import get_db
from shared.security import require_admin
from .schemas import DealCreate, DealResponse, ProductCreate, ProductResponse, ProductUpdate
from .service import DealService, ProductService

product_router = APIRouter(tags=["Catalog"])
deal_router = APIRouter(tags=["Catalog"])


@product_router.post(
    "/",
    response_model=ProductResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_product(product: ProductCreate, db: AsyncSession = Depends(get_db)):
    return await ProductService.create_product(db, product)

@product_router.get("/", response_model=list[ProductResponse])
async def list_products(
    status: str = Query(default="published"),
    query: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db)
):
    products = await ProductService.list_products(db, status)

    if query:
        query_words = set(query.lower().split())
        products = [p for p in products if query_words & set(p.name.lower().split())]

    return products

@product_router.get("/{product_id:int}", response_model=ProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return await ProductService.get_product(db, product_id)

@product_router.patch(
    "/{product_id:int}",
    response_model=ProductResponse,
    dependencies=[Depends(require_admin)],
)
async def update_product(product_id: int, changes: ProductUpdate, db: AsyncSession = Depends(get_db)):
    return await ProductService.update_product(db, product_id, changes)


@deal_router.post(
    "/",
    response_model=DealResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_deal(deal: DealCreate, db: AsyncSession = Depends(get_db)):
    return await DealService.create_deal(db, deal)

@deal_router.get("/", response_model=list[DealResponse])
async def list_deals(status: str = Query(default="published"), db: AsyncSession = Depends(get_db)):
    return await DealService.list_deals(db, status)

@deal_router.get("/{deal_id:int}", response_model=DealResponse)
async def get_deal(deal_id: int, db: AsyncSession = Depends(get_db)):
    return await DealService.get_deal(db, deal_id)
