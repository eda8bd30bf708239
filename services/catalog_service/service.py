import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFound
from .models import Deal, Product
from .repository import DealRepository, ProductRepository
from .schemas import DealCreate, ProductCreate, ProductUpdate

logger = structlog.get_logger(__name__)


class ProductService:

    @staticmethod
    async def create_product(db: AsyncSession, data: ProductCreate):
        product = Product(**data.model_dump())
        product = await ProductRepository.create_product(db, product)
        logger.info("product_created", product_id=product.id, status=product.status)
        return product

    @staticmethod
    async def list_products(db: AsyncSession, status: str = "published"):
        # 'all' disables the status filter (admin panel listing)
        return await ProductRepository.list_products(db, None if status == "all" else status)

    @staticmethod
    async def get_product(db: AsyncSession, product_id: int):
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    @staticmethod
    async def update_product(db: AsyncSession, product_id: int, data: ProductUpdate):
        product = await ProductService.get_product(db, product_id)
        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(product, field, value)
        product = await ProductRepository.update_product(db, product)
        logger.info("product_updated", product_id=product.id, fields=sorted(changes))
        return product


class DealService:

    @staticmethod
    async def create_deal(db: AsyncSession, data: DealCreate):
        payload = data.model_dump(exclude={"products"})
        deal = Deal(
            **payload,
            products=[p.model_dump(by_alias=True) for p in data.products],
        )
        deal = await DealRepository.create_deal(db, deal)
        logger.info("deal_created", deal_id=deal.id, products=len(deal.products))
        return deal

    @staticmethod
    async def list_deals(db: AsyncSession, status: str = "published"):
        return await DealRepository.list_deals(db, None if status == "all" else status)

    @staticmethod
    async def get_deal(db: AsyncSession, deal_id: int):
        deal = await DealRepository.get_deal_by_id(db, deal_id)
        if not deal:
            raise NotFound("Deal not found")
        return deal
