"""Attributes module — per-product attribute schemas and variant combinations."""

from src.modules.attributes.combinations import (
    count_variant_combinations,
    generate_variant_combinations,
    iter_variant_combinations,
)
from src.modules.attributes.service import AttributeSchemaService

__all__ = [
    "AttributeSchemaService",
    "count_variant_combinations",
    "generate_variant_combinations",
    "iter_variant_combinations",
]
