"""SqlProductStore — BackingStoreProtocol[Product, NewProduct] over SQLAlchemy.

One AsyncSession per call. Errors from the driver propagate unchanged.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.mc_product.domain.models import NewProduct, Product
from src.mc_product.domain.repository import ProductRepositoryProtocol
from src.mc_product.infrastructure.persistence import ProductRepository


class SqlProductStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        repo: ProductRepositoryProtocol | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._repo: ProductRepositoryProtocol = repo or ProductRepository()

    async def list_all(self) -> list[Product]:
        async with self._session_factory() as db:
            return await self._repo.list_products(db)

    async def insert(self, draft: NewProduct) -> Product:
        async with self._session_factory() as db:
            async with db.begin():
                product = await self._repo.add_product(db, draft)
        return product
