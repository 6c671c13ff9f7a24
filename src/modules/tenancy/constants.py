"""Tenancy module constants — access-denied messages."""

# Missing records and foreign owners share one message per resource kind
PRODUCT_ACCESS_DENIED = "Product not found or access denied"
ATTRIBUTE_ACCESS_DENIED = "Attribute not found or access denied"
AUTHENTICATION_REQUIRED = "Authentication required"
