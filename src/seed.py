"""Database seeder — populates a demo brand with an attribute-driven product.

Run via: python -m src.seed
"""

import asyncio
import logging
from decimal import Decimal

from sqlalchemy import select

from src.database.engine import async_session, engine
from src.logging_config import configure_logging
from src.models import Brand, Product, ProductAttributeSchema, ProductCatalog, ProductVariant
from src.seed_data.catalog import ATTRIBUTES, BRAND, CATALOG, DEMO_USER_ID, PRODUCT, VARIANTS

logger = logging.getLogger(__name__)


async def seed() -> None:
    async with async_session() as session:
        existing = await session.execute(select(Brand.id).where(Brand.slug == BRAND["slug"]))
        if existing.scalar_one_or_none() is not None:
            logger.info("Demo brand already present, skipping")
            return

        brand = Brand(user_id=DEMO_USER_ID, **BRAND)
        session.add(brand)
        await session.flush()

        catalog = ProductCatalog(brand_id=brand.id, **CATALOG)
        session.add(catalog)
        await session.flush()

        product = Product(catalog_id=catalog.catalog_id, **PRODUCT)
        session.add(product)
        await session.flush()

        for attribute in ATTRIBUTES:
            session.add(ProductAttributeSchema(product_id=product.id, **attribute))
        for variant in VARIANTS:
            session.add(ProductVariant(
                product_id=product.id,
                sku=variant["sku"],
                price=Decimal(variant["price"]),
                attributes=variant["attributes"],
            ))

        await session.commit()
        logger.info(
            "Seeded brand %s, product %s with %d attributes and %d variants",
            brand.id, product.id, len(ATTRIBUTES), len(VARIANTS),
        )


async def main() -> None:
    configure_logging()
    try:
        await seed()
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
