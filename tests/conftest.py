"""Pytest fixtures: in-memory SQLite store seeded with two brands and their products."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass
from decimal import Decimal

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

import src.models  # noqa: F401  populate metadata
from src.database.base import Base
from src.models import Brand, Product, ProductCatalog, ProductVariant
from src.modules.tenancy.auth import AuthenticatedUser

# Use SQLite for lightweight in-process testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///file::memory:?cache=shared&uri=true"

OWNER_ID = "0b8f2a52-6a0e-4c55-9d0c-3c1f6f0e0001"
STRANGER_ID = "0b8f2a52-6a0e-4c55-9d0c-3c1f6f0e0002"


@dataclass
class SeededCatalog:
    """Plain ids so tests never touch ORM instances expired by a rollback."""

    owner: AuthenticatedUser
    stranger: AuthenticatedUser
    product_id: int
    sibling_product_id: int
    foreign_product_id: int


@pytest_asyncio.fixture
async def async_test_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def async_test_session(async_test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        async_test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(async_test_session: AsyncSession) -> SeededCatalog:
    """Owner brand with two products, stranger brand with one product."""
    session = async_test_session
    owner_brand = Brand(user_id=OWNER_ID, name="Northwind", slug="northwind")
    stranger_brand = Brand(user_id=STRANGER_ID, name="Contoso", slug="contoso")
    session.add_all([owner_brand, stranger_brand])
    await session.flush()

    session.add_all([
        ProductCatalog(catalog_id="northwind-core", brand_id=owner_brand.id, name="Core", slug="core"),
        ProductCatalog(catalog_id="contoso-main", brand_id=stranger_brand.id, name="Main", slug="main"),
    ])
    await session.flush()

    tee = Product(catalog_id="northwind-core", name="Everyday Tee")
    hoodie = Product(catalog_id="northwind-core", name="Zip Hoodie")
    mug = Product(catalog_id="contoso-main", name="Enamel Mug")
    session.add_all([tee, hoodie, mug])
    await session.flush()

    seeded = SeededCatalog(
        owner=AuthenticatedUser(id=OWNER_ID, email="owner@northwind.test"),
        stranger=AuthenticatedUser(id=STRANGER_ID, email="owner@contoso.test"),
        product_id=tee.id,
        sibling_product_id=hoodie.id,
        foreign_product_id=mug.id,
    )
    await session.commit()
    return seeded


@pytest_asyncio.fixture
async def make_variant(
    async_test_session: AsyncSession,
) -> Callable[[int, dict], Awaitable[int]]:
    """Persist a variant with the given attribute map and return its id."""
    counter = 0

    async def _make(product_id: int, attributes: dict) -> int:
        nonlocal counter
        counter += 1
        variant = ProductVariant(
            product_id=product_id,
            sku=f"SKU-{product_id}-{counter}",
            price=Decimal("19.99"),
            attributes=attributes,
        )
        async_test_session.add(variant)
        await async_test_session.commit()
        return variant.id

    return _make
