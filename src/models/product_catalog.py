from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.base import Base, IntegerPrimaryKeyMixin, JSONType, TimestampMixin
from src.models.enums import RecordStatus

if TYPE_CHECKING:
    from src.models.brand import Brand
    from src.models.product import Product


class ProductCatalog(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "product_catalogs"

    # Public catalog identifier referenced by products.catalog_id
    catalog_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    brand_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("brands.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String)
    settings: Mapped[dict | None] = mapped_column(JSONType)
    status: Mapped[str] = mapped_column(String(20), server_default=RecordStatus.DRAFT.value, nullable=False)

    brand: Mapped[Brand] = relationship("Brand", back_populates="catalogs")
    products: Mapped[list[Product]] = relationship("Product", back_populates="catalog")

    __table_args__ = (
        Index("ix_product_catalogs_brand_id", "brand_id"),
    )
