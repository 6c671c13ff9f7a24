from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.base import Base, IntegerPrimaryKeyMixin, JSONType, TimestampMixin
from src.models.enums import RecordStatus

if TYPE_CHECKING:
    from src.models.product_attribute_schema import ProductAttributeSchema
    from src.models.product_catalog import ProductCatalog
    from src.models.product_variant import ProductVariant


class Product(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "products"

    catalog_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("product_catalogs.catalog_id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(String, server_default="", nullable=False)
    base_attributes: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, server_default="0", nullable=False)
    status: Mapped[str] = mapped_column(String(20), server_default=RecordStatus.DRAFT.value, nullable=False)

    # Relationships
    catalog: Mapped[ProductCatalog] = relationship("ProductCatalog", back_populates="products")
    variants: Mapped[list[ProductVariant]] = relationship(
        "ProductVariant", back_populates="product", cascade="all, delete-orphan"
    )
    attribute_schemas: Mapped[list[ProductAttributeSchema]] = relationship(
        "ProductAttributeSchema", back_populates="product", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_products_catalog_id", "catalog_id"),
    )
