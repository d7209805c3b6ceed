"""Initial catalogue.

seed_products() only writes into an empty table, so it is safe to call on
every startup. The caller owns the transaction.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.mc_product.domain.models import NewProduct
from src.mc_product.domain.repository import ProductRepositoryProtocol
from src.mc_product.infrastructure.db_models import ProductORM
from src.mc_product.infrastructure.persistence import ProductRepository

SEED_PRODUCTS: tuple[NewProduct, ...] = tuple(
    NewProduct(name=name, price=Decimal(price))
    for name, price in (
        ("Laptop", "999.99"),
        ("Mouse", "19.99"),
        ("Keyboard", "49.99"),
        ("Monitor", "199.99"),
        ("Printer", "89.99"),
        ("Smartphone", "699.99"),
        ("Tablet", "299.99"),
        ("Headphones", "79.99"),
        ("Webcam", "59.99"),
        ("External Hard Drive", "129.99"),
        ("USB Flash Drive", "29.99"),
        ("Graphics Card", "499.99"),
        ("Motherboard", "149.99"),
        ("Power Supply", "89.99"),
        ("SSD", "99.99"),
        ("RAM", "79.99"),
        ("Cooling Fan", "39.99"),
        ("Case", "69.99"),
        ("Network Card", "59.99"),
        ("Sound Card", "89.99"),
    )
)


async def seed_products(
    db: AsyncSession,
    repo: ProductRepositoryProtocol | None = None,
) -> int:
    """Insert SEED_PRODUCTS if the table is empty. Returns rows inserted."""
    existing = await db.scalar(select(func.count()).select_from(ProductORM))
    if existing:
        return 0
    repo = repo or ProductRepository()
    for draft in SEED_PRODUCTS:
        await repo.add_product(db, draft)
    return len(SEED_PRODUCTS)
