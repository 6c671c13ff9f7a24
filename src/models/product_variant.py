from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.base import Base, IntegerPrimaryKeyMixin, JSONType, TimestampMixin
from src.models.enums import RecordStatus

if TYPE_CHECKING:
    from src.models.product import Product


class ProductVariant(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "product_variants"

    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    sku: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # attribute_key -> chosen value
    attributes: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)
    inventory_count: Mapped[int | None] = mapped_column(Integer)
    is_active: Mapped[bool] = mapped_column(Boolean, server_default="1", nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, server_default="0", nullable=False)
    status: Mapped[str] = mapped_column(String(20), server_default=RecordStatus.DRAFT.value, nullable=False)

    product: Mapped[Product] = relationship("Product", back_populates="variants")

    __table_args__ = (
        Index("ix_product_variants_product_id", "product_id"),
    )
