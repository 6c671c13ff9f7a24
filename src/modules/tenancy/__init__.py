"""Tenancy module — caller identity and brand ownership checks."""

from src.modules.tenancy.auth import AuthenticatedUser, get_current_user
from src.modules.tenancy.ownership import (
    get_product_owner_id,
    load_owned_attribute,
    load_owned_attributes,
    require_product_owner,
    require_user,
)

__all__ = [
    # Auth
    "AuthenticatedUser",
    "get_current_user",
    # Ownership
    "get_product_owner_id",
    "require_product_owner",
    "require_user",
    "load_owned_attribute",
    "load_owned_attributes",
]
