"""ProductAttributeSchema model — per-product attribute definitions driving variants."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.base import Base, IntegerPrimaryKeyMixin, JSONType, TimestampMixin

if TYPE_CHECKING:
    from src.models.product import Product


class ProductAttributeSchema(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "product_attribute_schemas"

    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    attribute_key: Mapped[str] = mapped_column(String(100), nullable=False)
    attribute_label: Mapped[str] = mapped_column(String(255), nullable=False)
    attribute_type: Mapped[str] = mapped_column(String(20), nullable=False)
    # Ordered list of {"value": ..., "label": ...}
    options: Mapped[list[dict] | None] = mapped_column(JSONType, default=list)
    default_value: Mapped[Any | None] = mapped_column(JSONType)
    is_required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_variant_defining: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    validation_rules: Mapped[dict | None] = mapped_column(JSONType, default=dict)
    help_text: Mapped[str | None] = mapped_column(String)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    product: Mapped[Product] = relationship("Product", back_populates="attribute_schemas")

    __table_args__ = (
        UniqueConstraint("product_id", "attribute_key", name="uq_product_attribute_schemas_product_key"),
        Index("ix_product_attribute_schemas_product_sort", "product_id", "sort_order"),
    )

    @property
    def option_values(self) -> list[str]:
        return [option["value"] for option in self.options or []]

    def __repr__(self) -> str:
        return (
            f"<ProductAttributeSchema id={self.id} product={self.product_id} "
            f"key={self.attribute_key} type={self.attribute_type}>"
        )
