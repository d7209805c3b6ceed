# src/mc_product/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mc_product.domain.models import NewProduct, Product


class ProductRepositoryProtocol(Protocol):
    async def list_products(self, db: AsyncSession) -> list[Product]: ...

    async def add_product(self, db: AsyncSession, draft: NewProduct) -> Product: ...
