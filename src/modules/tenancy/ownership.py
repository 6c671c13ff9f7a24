"""Brand ownership checks — product → catalog → brand → owning user."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import UnauthorizedException
from src.models.brand import Brand
from src.models.product import Product
from src.models.product_attribute_schema import ProductAttributeSchema
from src.models.product_catalog import ProductCatalog
from src.modules.tenancy.auth import AuthenticatedUser
from src.modules.tenancy.constants import (
    ATTRIBUTE_ACCESS_DENIED,
    AUTHENTICATION_REQUIRED,
    PRODUCT_ACCESS_DENIED,
)

logger = logging.getLogger(__name__)


def _deny(message: str, reason: str, **context: object) -> UnauthorizedException:
    logger.warning("Access denied (%s): %s", reason, context)
    return UnauthorizedException(message, reason=reason)


def require_user(user: AuthenticatedUser | None) -> AuthenticatedUser:
    if user is None:
        raise _deny(AUTHENTICATION_REQUIRED, "anonymous")
    return user


def _owner_query():
    return (
        select(Brand.user_id)
        .select_from(Product)
        .join(ProductCatalog, ProductCatalog.catalog_id == Product.catalog_id)
        .join(Brand, Brand.id == ProductCatalog.brand_id)
    )


async def get_product_owner_id(session: AsyncSession, product_id: int) -> str | None:
    """Return the owning brand's ``user_id`` for a product, or None if the chain is broken."""
    result = await session.execute(_owner_query().where(Product.id == product_id))
    return result.scalar_one_or_none()


async def require_product_owner(
    session: AsyncSession, product_id: int, user: AuthenticatedUser | None
) -> None:
    """Raise UnauthorizedException unless *user* owns the product's brand.

    A missing product and a foreign owner are indistinguishable to the caller.
    """
    user = require_user(user)
    owner_id = await get_product_owner_id(session, product_id)
    if owner_id is None:
        raise _deny(PRODUCT_ACCESS_DENIED, "missing", product_id=product_id, user_id=user.id)
    if owner_id != user.id:
        raise _deny(PRODUCT_ACCESS_DENIED, "not_owner", product_id=product_id, user_id=user.id)


async def load_owned_attribute(
    session: AsyncSession, attribute_id: int, user: AuthenticatedUser | None
) -> ProductAttributeSchema:
    """Load an attribute schema the caller owns through its product's brand."""
    user = require_user(user)
    stmt = (
        select(ProductAttributeSchema, Brand.user_id)
        .join(Product, Product.id == ProductAttributeSchema.product_id)
        .join(ProductCatalog, ProductCatalog.catalog_id == Product.catalog_id)
        .join(Brand, Brand.id == ProductCatalog.brand_id)
        .where(ProductAttributeSchema.id == attribute_id)
    )
    row = (await session.execute(stmt)).one_or_none()
    if row is None:
        raise _deny(ATTRIBUTE_ACCESS_DENIED, "missing", attribute_id=attribute_id, user_id=user.id)
    attribute, owner_id = row
    if owner_id != user.id:
        raise _deny(ATTRIBUTE_ACCESS_DENIED, "not_owner", attribute_id=attribute_id, user_id=user.id)
    return attribute


async def load_owned_attributes(
    session: AsyncSession, attribute_ids: list[int], user: AuthenticatedUser | None
) -> dict[int, ProductAttributeSchema]:
    """Load several attribute schemas at once; every id must exist and be owned by *user*."""
    user = require_user(user)
    stmt = (
        select(ProductAttributeSchema, Brand.user_id)
        .join(Product, Product.id == ProductAttributeSchema.product_id)
        .join(ProductCatalog, ProductCatalog.catalog_id == Product.catalog_id)
        .join(Brand, Brand.id == ProductCatalog.brand_id)
        .where(ProductAttributeSchema.id.in_(attribute_ids))
    )
    rows = (await session.execute(stmt)).all()
    found = {attribute.id: (attribute, owner_id) for attribute, owner_id in rows}

    missing = [attribute_id for attribute_id in attribute_ids if attribute_id not in found]
    if missing:
        raise _deny(ATTRIBUTE_ACCESS_DENIED, "missing", attribute_ids=missing, user_id=user.id)
    foreign = [attribute_id for attribute_id, (_, owner_id) in found.items() if owner_id != user.id]
    if foreign:
        raise _deny(ATTRIBUTE_ACCESS_DENIED, "not_owner", attribute_ids=foreign, user_id=user.id)
    return {attribute_id: attribute for attribute_id, (attribute, _) in found.items()}
