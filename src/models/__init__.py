# Import all models so SQLAlchemy metadata is populated for Alembic autogenerate
from src.models.brand import Brand
from src.models.enums import AttributeType, RecordStatus
from src.models.product import Product
from src.models.product_attribute_schema import ProductAttributeSchema
from src.models.product_catalog import ProductCatalog
from src.models.product_variant import ProductVariant

__all__ = [
    "AttributeType",
    "Brand",
    "Product",
    "ProductAttributeSchema",
    "ProductCatalog",
    "ProductVariant",
    "RecordStatus",
]
