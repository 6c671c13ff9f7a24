"""Attribute module constants — key format, messages and governance limits."""

ATTRIBUTE_KEY_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_\-]*$"
ATTRIBUTE_KEY_MAX_LENGTH = 100

MAX_OPTIONS_PER_ATTRIBUTE = 500

DUPLICATE_ATTRIBUTE_KEY = "Attribute key already exists for this product"
DUPLICATE_OPTION_VALUE = "Option value already exists"
OPTION_NOT_FOUND = "Option not found"
ATTRIBUTE_IN_USE = "Cannot delete attribute that is used by variants"
OPTION_IN_USE = "Cannot remove option that is used by variants"
REORDER_FAILED = "Failed to update attribute order"
UNKNOWN_ERROR = "Unknown error occurred"
