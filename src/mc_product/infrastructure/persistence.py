"""ProductRepository — concrete implementation of ProductRepositoryProtocol.

Transaction ownership: the CALLER opens the session and, for writes,
wraps the call in `async with db.begin()` (see SqlProductStore).
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.mc_common.datetime_utils import utc_now
from src.mc_common.money import quantize_price
from src.mc_product.domain.models import NewProduct, Product
from src.mc_product.infrastructure.db_models import ProductORM

_LIST_PRODUCTS = select(ProductORM).order_by(ProductORM.id.asc())


def _orm_to_product(row: ProductORM) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        price=row.price,
        last_updated=row.last_updated,
    )


class ProductRepository:
    """Stateless — instantiate once, reuse across calls."""

    async def list_products(self, db: AsyncSession) -> list[Product]:
        # id is unique, so id ASC alone gives a stable order
        result = await db.execute(_LIST_PRODUCTS)
        return [_orm_to_product(row) for row in result.scalars().all()]

    async def add_product(self, db: AsyncSession, draft: NewProduct) -> Product:
        row = ProductORM(
            name=draft.name,
            price=quantize_price(draft.price),
            last_updated=utc_now(),
        )
        db.add(row)
        await db.flush()  # Get row.id without committing
        return _orm_to_product(row)
