from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.base import Base, IntegerPrimaryKeyMixin, TimestampMixin
from src.models.enums import RecordStatus

if TYPE_CHECKING:
    from src.models.product_catalog import ProductCatalog


class Brand(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "brands"

    # Identity of the owning user as issued by the auth provider
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(String(20), server_default=RecordStatus.DRAFT.value, nullable=False)

    catalogs: Mapped[list[ProductCatalog]] = relationship("ProductCatalog", back_populates="brand")

    __table_args__ = (
        Index("ix_brands_user_id", "user_id"),
    )
