"""Demo brand, catalog, product, attribute schemas and variants."""

DEMO_USER_ID = "00000000-0000-4000-8000-000000000001"

BRAND = {"name": "Northwind Apparel", "slug": "northwind-apparel", "status": "active"}

CATALOG = {
    "catalog_id": "northwind-core",
    "name": "Core Collection",
    "slug": "core-collection",
    "status": "active",
}

PRODUCT = {
    "name": "Everyday Tee",
    "description": "Midweight cotton t-shirt.",
    "status": "active",
}

ATTRIBUTES: list[dict] = [
    {
        "attribute_key": "color",
        "attribute_label": "Color",
        "attribute_type": "color",
        "options": [
            {"value": "red", "label": "Red"},
            {"value": "blue", "label": "Blue"},
        ],
        "is_required": True,
        "sort_order": 0,
    },
    {
        "attribute_key": "size",
        "attribute_label": "Size",
        "attribute_type": "select",
        "options": [
            {"value": "S", "label": "Small"},
            {"value": "M", "label": "Medium"},
            {"value": "L", "label": "Large"},
        ],
        "default_value": "M",
        "is_required": True,
        "sort_order": 1,
    },
    {
        "attribute_key": "care_notes",
        "attribute_label": "Care notes",
        "attribute_type": "text",
        "is_variant_defining": False,
        "validation_rules": {"type": "string", "maxLength": 200},
        "help_text": "Shown on the product page.",
        "sort_order": 2,
    },
]

VARIANTS: list[dict] = [
    {"sku": "TEE-RED-M", "price": "24.00", "attributes": {"color": "red", "size": "M"}},
    {"sku": "TEE-BLUE-L", "price": "24.00", "attributes": {"color": "blue", "size": "L"}},
]
