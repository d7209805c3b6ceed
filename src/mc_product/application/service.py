"""ProductApplicationService — thin composition over CacheAsideReader.

Reads are served from the shared process cache when possible; every add
invalidates it.
"""

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.settings import settings
from src.mc_cache.application.cache_aside import CacheAsideReader
from src.mc_cache.infrastructure.memory_store import get_memory_cache
from src.mc_common.database import async_session_factory
from src.mc_product.application.schemas import (
    ProductCreate,
    ProductListResponse,
    ProductOut,
)
from src.mc_product.domain.models import NewProduct, Product
from src.mc_product.infrastructure.store import SqlProductStore

logger = logging.getLogger("mc.product")

ProductReader = CacheAsideReader[Product, NewProduct]


def build_product_reader(
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> ProductReader:
    """Wire the reader from settings: shared MemoryCache + SQL store."""
    return CacheAsideReader(
        SqlProductStore(session_factory),
        get_memory_cache(size_limit=settings.CACHE_SIZE_LIMIT),
        cache_key=settings.PRODUCTS_CACHE_KEY,
        sliding_expiration=timedelta(minutes=settings.CACHE_SLIDING_EXPIRATION_MINUTES),
        absolute_expiration=timedelta(minutes=settings.CACHE_ABSOLUTE_EXPIRATION_MINUTES),
        # The whole snapshot counts as one unit against CACHE_SIZE_LIMIT.
        size=1 if settings.CACHE_SIZE_LIMIT is not None else None,
    )


class ProductApplicationService:
    def __init__(self, reader: ProductReader | None = None) -> None:
        self._reader: ProductReader = reader or build_product_reader()

    async def get_products(self) -> ProductListResponse:
        products = await self._reader.get_all()
        items = [ProductOut.from_domain(p) for p in products]
        return ProductListResponse(items=items, count=len(items))

    async def add_product(self, body: ProductCreate) -> ProductOut:
        product = await self._reader.add(body.to_domain())
        logger.info("Product %d (%s) created", product.id, product.name)
        return ProductOut.from_domain(product)

    def clear_cache(self) -> None:
        self._reader.clear()
