"""Process entry point: wires the product service and runs a cache walkthrough.

Run with: python -m src.main [--add NAME PRICE] [--clear]

Startup seeds the catalogue into an empty table. The walkthrough lists
products twice (database read, then cache hit), optionally adds a product
(invalidating the cache) and lists again.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import typer
import uvloop
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from config.settings import settings
from src.mc_common.database import async_session_factory, engine, ping_database
from src.mc_common.errors import AppError, InternalError
from src.mc_common.logging_config import setup_logging
from src.mc_product.application.schemas import parse_product
from src.mc_product.application.service import (
    ProductApplicationService,
    build_product_reader,
)
from src.mc_product.infrastructure.seed import seed_products

logger = logging.getLogger("mc.app")

app = typer.Typer(
    name="memory-caching",
    help=f"{settings.APP_NAME}: cached product catalogue walkthrough",
    add_completion=False,
)


@asynccontextmanager
async def lifespan(
    target: AsyncEngine = engine,
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> AsyncGenerator[ProductApplicationService, None]:
    """Startup: verify DB, seed empty catalogue. Shutdown: dispose the engine pool."""
    try:
        try:
            await ping_database(target)
        except (OSError, SQLAlchemyError) as exc:
            raise InternalError(f"Database unreachable: {exc}") from exc

        async with session_factory() as db, db.begin():
            inserted = await seed_products(db)
        if inserted:
            logger.info("Seeded %d products", inserted)

        yield ProductApplicationService(reader=build_product_reader(session_factory))
    finally:
        await target.dispose()


async def run(add: tuple[str, str] | None, clear: bool) -> None:
    async with lifespan() as service:
        first = await service.get_products()
        logger.info("Listed %d products", first.count)
        await service.get_products()  # served from cache

        if add is not None:
            name, price = add
            created = await service.add_product(parse_product({"name": name, "price": price}))
            logger.info("Created product %d: %s %s", created.id, created.name, created.price_display)
        if clear:
            service.clear_cache()

        final = await service.get_products()
        for item in final.items:
            logger.info("%5d  %-24s %12s", item.id, item.name, item.price_display)


@app.command()
def walkthrough(
    add: tuple[str, str] = typer.Option(
        (None, None),
        "--add",
        metavar="NAME PRICE",
        help="Add a product between the cached reads",
    ),
    clear: bool = typer.Option(
        False,
        "--clear",
        help="Clear the products cache before the final read",
    ),
) -> None:
    """List, re-list from cache, optionally add, then list again."""
    setup_logging(settings.LOG_LEVEL)
    product = add if add and add[0] is not None else None
    try:
        uvloop.run(run(product, clear))
    except AppError as exc:
        typer.echo(f"Error {exc.code}: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
